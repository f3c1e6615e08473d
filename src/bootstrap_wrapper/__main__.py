import sys

from bootstrap_wrapper.harness import main

if __name__ == "__main__":
    sys.exit(main())
