from .corners import Corners, cell_corners
from .crossfade import BackgroundCrossfade, CrossfadeState
from .geometry import panel_height, row_height, row_spacing, title_row_padding
from .layout import PanelLayout, build_panel
from .motion import MotionPlan, Phase, fingerprint, motion_plan, schedule
from .timeline import RowTransitions
