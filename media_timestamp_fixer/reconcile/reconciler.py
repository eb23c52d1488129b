"""
Timestamp reconciliation.

Decides, per attribute, whether a file's creation and modification times
should be overwritten given a single candidate timestamp. Pure functions
only: reading and writing timestamps happens elsewhere.

Two policies, chosen by where the candidate came from:

  Metadata (exact match)
      The candidate is an authoritative instant. Each attribute that is not
      exactly equal to it is set to it.

  Filename (date-aware)
      Only the candidate's date is trustworthy; its time-of-day is a
      placeholder. Attributes are compared by calendar date. When one
      attribute already has the right date, its time-of-day is borrowed to
      repair the other, so a precise time is never replaced by the
      placeholder.
"""
from datetime import datetime

from ..models import Candidate, Decision, Source


def reconcile(candidate: Candidate,
              current_creation: datetime,
              current_modification: datetime) -> Decision:
    if candidate.source is Source.METADATA:
        return _reconcile_exact(candidate, current_creation, current_modification)
    if candidate.source is Source.FILENAME:
        return _reconcile_date_aware(candidate, current_creation, current_modification)
    raise ValueError(f"Unknown candidate source: {candidate.source!r}")


def _reconcile_exact(candidate: Candidate,
                     current_creation: datetime,
                     current_modification: datetime) -> Decision:
    target = candidate.value
    return Decision(
        target_creation=target if current_creation != target else None,
        target_modification=target if current_modification != target else None,
        source=Source.METADATA,
    )


def _reconcile_date_aware(candidate: Candidate,
                          current_creation: datetime,
                          current_modification: datetime) -> Decision:
    target_date = candidate.value.date()
    creation_ok = current_creation.date() == target_date
    modification_ok = current_modification.date() == target_date

    if creation_ok and modification_ok:
        return Decision(source=Source.FILENAME)

    if creation_ok:
        repaired = datetime.combine(target_date, current_creation.time())
        return Decision(target_modification=repaired, source=Source.FILENAME)

    if modification_ok:
        repaired = datetime.combine(target_date, current_modification.time())
        return Decision(target_creation=repaired, source=Source.FILENAME)

    # No trustworthy time-of-day to borrow
    return Decision(
        target_creation=candidate.value,
        target_modification=candidate.value,
        source=Source.FILENAME,
    )
