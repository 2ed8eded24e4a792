"""Per-day joins of entries, plans and real consumption."""
