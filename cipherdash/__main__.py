"""
CipherDash Module Entry Point
==============================

Allows running the CipherDash CLI via: python -m cipherdash
"""

from cipherdash.cli import main

if __name__ == "__main__":
    main()
