"""Application layer – query translation and search execution."""
