"""Testing helpers – in-memory doubles for the search ports."""
