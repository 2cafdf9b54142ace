"""Interactive console for the office assistant responder."""

import argparse
import logging
from pathlib import Path

from responder import ConversationTurn, build_responder
from responder.config import load_config


def main() -> None:
    parser = argparse.ArgumentParser(description="Chat with the office assistant from the terminal.")
    parser.add_argument("--config", default=None, help="Path to a JSON or YAML config file.")
    parser.add_argument("--data", default=None, help="Path to the knowledge base jsonl file.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.config)
    data_path = args.data or config.get("knowledge", {}).get("source", "")
    if not data_path or not Path(data_path).exists():
        print(f"Knowledge base not found: {data_path}")
        print("Set knowledge.source in the config or pass --data.")
        return

    responder = build_responder(config, data_path)

    history: list = []
    print("Office assistant ready. Type 'exit' to quit.")
    while True:
        user_input = input("you> ").strip()
        if not user_input or user_input.lower() in {"exit", "quit"}:
            break
        reply = responder.respond(user_input, history)
        print(f"bot [{reply.provenance.value}]> {reply.text}")
        history.append(ConversationTurn(role="user", content=user_input))
        history.append(ConversationTurn(role="assistant", content=reply.text))


if __name__ == "__main__":
    main()
