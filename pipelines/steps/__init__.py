# Namespace for pipeline steps
from .load_directory import LoadDirectory  # noqa: F401
from .fetch_post_tabs import FetchPostTabs  # noqa: F401
from .load_side_tabs import LoadCombinedLeads, LoadMessages  # noqa: F401
from .summarize import ComputeStats, MergeLeads  # noqa: F401
