import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
sys.path = [path for path in sys.path if Path(path).resolve() != SCRIPT_DIR]

REPO_ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = REPO_ROOT / "backend"
sys.path.insert(0, str(BACKEND_DIR))

from db import SessionLocal, bootstrap_schema, check_db_connection, engine  # noqa: E402
from srd.driver import PROGRESS_EVERY, BatchDriver, RunSummary  # noqa: E402
from srd.sink import count_rows  # noqa: E402
from srd.source import SRDClient  # noqa: E402


def print_counts(title: str, counts: dict[str, int]) -> None:
    print(f"\n--- {title} ---")
    for table_name, count in counts.items():
        print(f"{table_name}: {count}")


def print_outcomes(summary: RunSummary) -> None:
    totals = summary.totals()
    parts = [f"{outcome.value}={count}" for outcome, count in sorted(totals.items())]
    print("Outcomes: " + (", ".join(parts) or "none"))


def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    check_db_connection()
    bootstrap_schema(engine)

    with SessionLocal() as session:
        print_counts("Current counts", count_rows(session))

    driver = BatchDriver(
        SRDClient(),
        SessionLocal,
        progress_every=int(os.getenv("SRD_PROGRESS_EVERY", str(PROGRESS_EVERY))),
    )
    print("\n--- Starting import ---")
    summary = driver.run()

    with SessionLocal() as session:
        print_counts("Final counts", count_rows(session))
    print_outcomes(summary)
    print("\nDone!")


if __name__ == "__main__":
    main()
