import sys

from strava_distance.cli import main

if __name__ == "__main__":
    sys.exit(main())
