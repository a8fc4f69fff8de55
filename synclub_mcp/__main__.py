from synclub_mcp.server import main

main()
