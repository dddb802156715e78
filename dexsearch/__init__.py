"""Client-side creature search: intent classification, fuzzy ranking, ordered concurrent retrieval."""
