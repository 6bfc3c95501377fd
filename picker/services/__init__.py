"""Service layer for the movie night picker."""
