# Importing the tab modules registers their builders.
from . import directory_tab, lead_tab, message_tab, profile_tab  # noqa: F401
