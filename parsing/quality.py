from .models import ResumeRecord


def score(record: ResumeRecord) -> int:
    """Heuristic 0-100 confidence that the record came from a layout we understand."""
    pi = record.personal_info
    total = 0
    if len(pi.full_name) > 2:
        total += 20
    if "@" in pi.email:
        total += 15
    if len(pi.phone) > 8:
        total += 10
    if pi.location:
        total += 5
    if len(pi.summary) > 50:
        total += 15
    if record.experience:
        total += 20
    if record.education:
        total += 10
    if record.skills:
        total += 5
    return total
