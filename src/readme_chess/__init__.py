"""
README Chess package.

Components:
- commands: issue title -> Command
- session/referee: rebuild the game in progress from games/current.pgn and data/last_moves.txt
- bot: validate and apply one command, report back on the issue
- terminal/ledger: archive finished games, count moves per player
- markdown/templates: render the board into README.md
- github_client/mock_github/selftest: issue transport, a mock for scenario replays
"""
# Package exports are intentionally minimal; import modules directly as needed.
