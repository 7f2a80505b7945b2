"""Run the Task Tracker API: python -m src.api"""

from .main import run

if __name__ == "__main__":
    run()
