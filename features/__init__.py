"""Feature extraction modules."""
from .edge_signatures import nearest_color, build_side_info, edge_to_id, PROPORTION_DENOM
from .artifacts import FlagEdges, create_flag_edges, save_flag_edges, load_flag_edges
