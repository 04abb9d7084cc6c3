"""
Integrity checks over a decoded commit.

Decoding only rejects structurally impossible bytes. These checks look at the
decoded values as a whole:
  - segment ids and names are unique
  - deletions never exceed the documents a segment holds
  - segment versions are not older than the commit's recorded minimum
  - commit ids have the right length
"""

from __future__ import annotations

import hashlib
from collections import Counter

from segmentinfos.layout import ID_LENGTH
from segmentinfos.models import CommitSnapshot


# =============================================================================
# Consistency
# =============================================================================

def check_consistency(snapshot: CommitSnapshot) -> list[str]:
    """Return a human-readable problem for every violated invariant. Empty means clean."""
    problems: list[str] = []

    id_counts = Counter(sci.info.id for sci in snapshot.segments)
    for segment_id, count in sorted(id_counts.items()):
        if count > 1:
            problems.append(f"segment id {segment_id.hex()} appears {count} times")

    name_counts = Counter(sci.name for sci in snapshot.segments)
    for name, count in sorted(name_counts.items()):
        if count > 1:
            problems.append(f"segment name {name} appears {count} times")

    for sci in snapshot.segments:
        deleted = sci.del_count + sci.soft_del_count
        if deleted > sci.info.doc_count:
            problems.append(
                f"segment {sci.name}: del_count {sci.del_count} + soft_del_count "
                f"{sci.soft_del_count} exceeds doc_count {sci.info.doc_count}"
            )
        if len(sci.info.id) != ID_LENGTH:
            problems.append(f"segment {sci.name}: id is {len(sci.info.id)} bytes, expected {ID_LENGTH}")
        if sci.sci_id is not None and len(sci.sci_id) != ID_LENGTH:
            problems.append(f"segment {sci.name}: sci_id is {len(sci.sci_id)} bytes, expected {ID_LENGTH}")
        minimum = snapshot.min_segment_lucene_version
        if minimum is not None and sci.info.version < minimum:
            problems.append(
                f"segment {sci.name}: version {sci.info.version} is older than "
                f"commit minimum {minimum}"
            )

    if len(snapshot.id) != ID_LENGTH:
        problems.append(f"commit id is {len(snapshot.id)} bytes, expected {ID_LENGTH}")

    return problems


def verify_integrity(snapshot: CommitSnapshot) -> bool:
    return not check_consistency(snapshot)


# =============================================================================
# Fingerprint
# =============================================================================

def fingerprint(snapshot: CommitSnapshot) -> str:
    """
    Short identifier for a commit: same index, generation and version give the
    same fingerprint. Useful for de-duplicating reports.
    """
    material = f"{snapshot.id.hex()}:{snapshot.generation}:{snapshot.version}"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()[:16]
