"""
Run with: python -m spiralgalaxy
"""
import sys

from spiralgalaxy.app.main import main

if __name__ == "__main__":
    sys.exit(main())
