"""Record identifier generation"""

import uuid


def new_id(prefix: str = "") -> str:
    """Short random id, optionally prefixed (e.g. 'AS-', 'DOC-', 'TE-')"""
    token = uuid.uuid4().hex[:10].upper()
    return f"{prefix}{token}"
