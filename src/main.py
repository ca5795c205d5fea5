"""Entry point: channel | web | tools."""

import sys

_MODES = {
    "channel": "channel_candidates",
    "web": "web_candidates",
}


def main():
    mode = "channel"
    if len(sys.argv) > 1:
        mode = sys.argv[1].lower()

    if mode in _MODES:
        from src.interfaces.oneshot import main as run_oneshot_main

        query_parts = sys.argv[2:]
        if query_parts:
            text = " ".join(query_parts).strip()
        elif mode == "web" and not sys.stdin.isatty():
            text = sys.stdin.read().strip()
        else:
            text = ""
        sys.exit(run_oneshot_main(_MODES[mode], text))

    elif mode == "tools":
        from src.core.bootstrap import build_services

        print(build_services().registry.get_tools_prompt())

    else:
        print(f"Unknown mode: {mode}")
        print("Usage: python -m src.main [channel|web|tools] [text...]")
        sys.exit(1)


if __name__ == "__main__":
    main()
