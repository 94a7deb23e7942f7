"""Command line interface for the playlist tracker."""
