"""HTTP surface for the exam preparation service."""
