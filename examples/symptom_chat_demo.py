"""Send one message through the chat service and print the answer."""

import sys

from health_assistant import chat_with_ai

if __name__ == "__main__":
    question = " ".join(sys.argv[1:]) or "I have a bad headache and some pain"
    reply = chat_with_ai(question, session_id="demo-session")
    print("User:", question)
    print(f"Assistant ({reply['model']}, {reply['intent']}, {reply['confidence']}):")
    print(reply["response"])
    for suggestion in reply["suggestions"]:
        print(" -", suggestion)
