#!/usr/bin/env python

import sys


def main():
    """Main entry point"""
    from lol_autopilot.cli import main as cli_main
    cli_main(sys.argv[1:])


if __name__ == "__main__":
    main()
