"""python -m rik: serve the RIK home named by RIK_HOME."""

from rik.main import run

if __name__ == "__main__":
    run()
