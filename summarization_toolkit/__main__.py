"""Package entry point for ``python -m summarization_toolkit``.

WHY: Users run the tools as ``python -m summarization_toolkit split ...``
without installing the console script.

HOW: Delegates to the CLI's main(), which dispatches on the subcommand.
"""

from summarization_toolkit.cli import main

if __name__ == "__main__":
    main()
