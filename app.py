#!/usr/bin/env python3
"""
Voter Desk - run the operator web interface
"""

from voter_desk import create_app


def main_cli():
    """CLI entry point"""
    application = create_app()

    print("Voter Desk")
    print("=" * 50)
    print("Access the desk at: http://localhost:5000")
    print()

    application.run(debug=True, host='0.0.0.0', port=5000)


if __name__ == '__main__':
    main_cli()
