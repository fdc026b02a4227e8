from typetutor.core.models import SessionSummary
from typetutor.utils.db_helper import ResultRecorder, insert_result, recent_results


def _summary(wpm=42):
    return SessionSummary(
        practice_type="words",
        items_completed=3,
        total_characters=30,
        correct_characters=27,
        elapsed_ms=60000,
        wpm=wpm,
        accuracy=90,
    )


def test_insert_and_read_back(tmp_path):
    db = str(tmp_path / "sub" / "results.db")
    insert_result(_summary(40), db)
    insert_result(_summary(50), db)
    rows = recent_results(db_path=db)
    assert [r.wpm for r in rows] == [50, 40]
    assert rows[0] == _summary(50)


def test_recorder_logs_instead_of_raising(tmp_path, caplog):
    # a directory cannot be opened as a database file
    ResultRecorder(str(tmp_path)).record(_summary())
    assert "Failed to save session result" in caplog.text
