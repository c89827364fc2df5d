"""Minimal example for LevelMap with prefix selection."""

from levelmap import LevelMap, Supplier


def main() -> None:
    """Run a basic put/select/remove flow on a three-field map."""
    actions = LevelMap(["theme", "name", "action"])
    actions.put("dark/button/click", "highlight")
    actions.put({"theme": "dark", "name": "button", "action": "hover"}, "glow")
    actions.put("light/button/click", "shade")
    print(f"{actions=}")
    print("size:", actions.size())

    dark_button = actions.select("dark/button")
    dark_button.put("press", "sink")
    print("dark button:", dark_button.to_dict(), "size:", dark_button.size())
    print("top-level size:", actions.size())

    print("missing:", actions.get("light/link/click", Supplier(lambda current: current.size())))
    print("keys:", actions.keys(as_string=True))

    dark_button.clear()
    print("after clearing dark/button:", actions.keys(as_string=True))


if __name__ == "__main__":
    main()
