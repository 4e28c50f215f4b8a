"""Print the AI provider configuration as seen by the chat service."""

from health_assistant import check_ai_health

if __name__ == "__main__":
    health = check_ai_health()
    mark = "✓" if health["status"] in ("configured", "mock") else "✗"
    print(f"{mark} AI Provider: {health['provider']} ({health['status']})")
    if health["model"]:
        print(f"  Model: {health['model']}")
    print(f"  {health['message']}")
    if health["status"] == "not_configured" and health["helpUrl"]:
        print(f"  Get your key from: {health['helpUrl']}")
