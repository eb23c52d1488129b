import pytest
from datetime import datetime

from media_timestamp_fixer.metadata.filename import extract_filename_candidate
from media_timestamp_fixer.models import Candidate, Decision, Source
from media_timestamp_fixer.reconcile.reconciler import reconcile


def applied(decision: Decision, creation: datetime, modification: datetime):
    """Timestamps after writing a decision."""
    return (
        decision.target_creation if decision.target_creation is not None else creation,
        decision.target_modification if decision.target_modification is not None else modification,
    )


# --- Metadata (exact match) ---

def test_metadata_already_correct():
    t = datetime(2024, 1, 15, 14, 22)
    d = reconcile(Candidate(Source.METADATA, t), t, t)
    assert not d.needs_update
    assert d.source == Source.METADATA


def test_metadata_fixes_only_the_wrong_attribute():
    t = datetime(2024, 1, 15, 14, 22)
    d = reconcile(Candidate(Source.METADATA, t), t, datetime(2024, 1, 15, 14, 0))
    assert d.target_creation is None
    assert d.target_modification == t


@pytest.mark.parametrize("modification", [
    datetime(2024, 1, 15, 14, 22),
    datetime(2019, 3, 3, 9, 0),
    datetime(2024, 1, 15, 14, 22, 30),
])
def test_metadata_creation_fix_ignores_modification_state(modification):
    t = datetime(2024, 1, 15, 14, 22)
    d = reconcile(Candidate(Source.METADATA, t), datetime(2023, 6, 1, 8, 0), modification)
    assert d.target_creation == t


def test_metadata_compares_seconds_and_microseconds():
    t = datetime(2024, 1, 15, 14, 22)
    d = reconcile(Candidate(Source.METADATA, t),
                  datetime(2024, 1, 15, 14, 22, 0, 1),
                  datetime(2024, 1, 15, 14, 22, 59))
    assert d.target_creation == t
    assert d.target_modification == t


def test_metadata_overrides_even_same_day_times():
    # A correct date is not enough for metadata; time must match too
    t = datetime(2024, 1, 15, 14, 22)
    d = reconcile(Candidate(Source.METADATA, t), datetime(2024, 1, 15, 8, 30), datetime(2024, 1, 15, 8, 30))
    assert d.target_creation == t
    assert d.target_modification == t


# --- Filename (date-aware) ---

def test_filename_borrows_time_from_correct_creation():
    c = extract_filename_candidate("IMG-20240115-WA0001.jpg")
    creation = datetime(2024, 1, 15, 8, 30)
    d = reconcile(c, creation, datetime(2023, 6, 1, 17, 45))

    assert d.source == Source.FILENAME
    assert d.target_creation is None
    assert d.target_modification == datetime(2024, 1, 15, 8, 30)


def test_filename_borrows_time_from_correct_modification():
    c = extract_filename_candidate("IMG-20240115-WA0001.jpg")
    modification = datetime(2024, 1, 15, 19, 2, 33, 120000)
    d = reconcile(c, datetime(2020, 2, 2, 2, 2), modification)

    assert d.target_modification is None
    assert d.target_creation == datetime(2024, 1, 15, 19, 2, 33, 120000)


def test_filename_both_wrong_uses_dummy_time():
    c = extract_filename_candidate("IMG-20240115-WA0001.jpg")
    d = reconcile(c, datetime(2023, 6, 1, 8, 30), datetime(2023, 6, 2, 9, 0))
    assert d.target_creation == datetime(2024, 1, 15, 10, 1)
    assert d.target_modification == datetime(2024, 1, 15, 10, 1)


def test_filename_both_correct_keeps_precise_times():
    c = extract_filename_candidate("IMG-20240115-WA0001.jpg")
    d = reconcile(c, datetime(2024, 1, 15, 7, 0), datetime(2024, 1, 15, 23, 59, 59))
    assert not d.needs_update
    assert d.source == Source.FILENAME


def test_filename_rollover_targets_next_day():
    c = extract_filename_candidate("IMG-20240115-WA1500.jpg")
    d = reconcile(c, datetime(2024, 1, 15, 8, 0), datetime(2024, 1, 15, 8, 0))
    assert d.target_creation == datetime(2024, 1, 16, 11, 0)
    assert d.target_modification == datetime(2024, 1, 16, 11, 0)


# --- Idempotence ---

@pytest.mark.parametrize("candidate, creation, modification", [
    (Candidate(Source.METADATA, datetime(2024, 1, 15, 14, 22)), datetime(2023, 1, 1), datetime(2024, 1, 15, 14, 22)),
    (Candidate(Source.METADATA, datetime(2024, 1, 15, 14, 22)), datetime(2023, 1, 1), datetime(2022, 5, 5, 5, 5)),
    (Candidate(Source.FILENAME, datetime(2024, 1, 15, 10, 1)), datetime(2024, 1, 15, 8, 30), datetime(2023, 6, 1)),
    (Candidate(Source.FILENAME, datetime(2024, 1, 15, 10, 1)), datetime(2023, 6, 1), datetime(2023, 6, 2)),
    (Candidate(Source.FILENAME, datetime(2024, 1, 15, 10, 1)), datetime(2023, 6, 1), datetime(2024, 1, 15, 6, 6, 6)),
])
def test_second_pass_is_a_no_op(candidate, creation, modification):
    first = reconcile(candidate, creation, modification)
    assert first.needs_update

    creation, modification = applied(first, creation, modification)
    second = reconcile(candidate, creation, modification)
    assert not second.needs_update


def test_unknown_source_is_rejected():
    with pytest.raises(ValueError):
        reconcile(Candidate(None, datetime(2024, 1, 1)), datetime(2024, 1, 1), datetime(2024, 1, 1))
