"""
Entry point for running tool_search as a module.

Allows running the tool search server via:
    python -m tool_search
"""

from tool_search.server import main

if __name__ == "__main__":
    main()
