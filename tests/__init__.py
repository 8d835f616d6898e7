"""Tests for devsetup."""
