"""Run the bot from a checkout without installing it: python main.py --issue 42"""
import sys

from src.readme_chess.cli import main

if __name__ == "__main__":
    sys.exit(main())
