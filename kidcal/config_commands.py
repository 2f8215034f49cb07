"""Settings commands for kidcal CLI: where data lives and how often it is saved."""

from cyclopts import App

from kidcal.config import DEFAULTS, Config, get_config

config_app = App(name="config", help="Show and change kidcal settings")


def _scope(config: Config) -> str:
    return "global" if config.is_global else "local"


def _describe(config: Config, key: str) -> str:
    source = config.source(key)
    if source is None:
        return f"{key} (unset)"
    return f"{key} = {config.get(key)} ({source})"


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Change a setting after checking the value fits it.

    Args:
        key: One of store, store.path, autosave.delay_ms
        value: ``json`` or ``sqlite`` for store, a file path, or milliseconds
        global_: Write to ~/.kidcal instead of the current directory
    """
    config = get_config(use_global=global_)
    config.set(key, value)
    print(f"{_describe(config, key)} [{_scope(config)} file]")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Remove a setting so the next level (global, then built-in) applies."""
    config = get_config(use_global=global_)
    config.unset(key)
    print(f"Removed {key} from {_scope(config)} file, now {_describe(config, key)}")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Show a setting's effective value and where it comes from."""
    print(_describe(get_config(use_global=global_), key))


@config_app.command(name="list")
def list_config(global_: bool = False) -> None:
    """Show every setting, including built-in defaults, and the resolved data file."""
    config = get_config(use_global=global_)
    for key in DEFAULTS:
        print(_describe(config, key))
    extra = sorted(k for k in config.list() if k not in DEFAULTS)
    for key in extra:
        print(f"{key} = {config.get(key)} (ignored)")
    print(f"\ndata file: {config.store_path()}")
