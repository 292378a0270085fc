"""Allow ``python -m gmail_mcp``."""

from gmail_mcp.main import main

main()
