"""Source indexing for PDB symbol files."""
