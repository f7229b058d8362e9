from .errors import InvalidParameter
from .sampler import RandomSource, make_rng, sample, sample_many
from .params import WalkParameters, JumpParameters, BridgeParameters, WalkVariant
from .path import PathPoint, path_to_frame, find_gaps
from .walk import step, generate_simple_walk, generate_jump_walk
from .bridge import bridge_moments, generate_interpolated_walk
from .engine import generate_path, replicate_paths
