"""
Run with: python -m weatherscatter [path/to/data.json]
"""
import sys

from weatherscatter.main import main

if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
