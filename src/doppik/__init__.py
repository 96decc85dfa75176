"""doppik - double-entry bookkeeping with SKR03 statements and year closings."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in click and the database layer; load it on first use.
    if name == "main":
        from doppik.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
