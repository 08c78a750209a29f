"""Outer interfaces of Milepost: the REST API and the command line."""
