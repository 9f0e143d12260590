from .units import SPEED_OF_LIGHT, dbm_to_mw, mw_to_dbm, wavelength_m
from .geometry import Point, Segment, distance, midpoint, intersect, segments_cross
from .sources import (
    BuildingRecord,
    CornerRow,
    GeometrySource,
    InMemoryGeometrySource,
)
from .buildings import Offset, Corner, Wall, Building, BuildingCache, build_from_source
from .occlusion import OcclusionEngine
from .fspl import friis_power, friis_received_power, max_range_m
from .knife_edge import fresnel_parameter, knife_edge_loss_db
from .config import (
    TwoRayParams,
    PenetrationParams,
    DiffractionParams,
    MapParams,
    ShadowingParameters,
    parse_ini_text_to_params,
    load_params_from_ini_file,
    load_params_from_json_file,
    params_from_dict,
)
from .propagation import (
    ModelKind,
    PropagationModel,
    FreeSpaceModel,
    TwoRayInterferenceModel,
    ShadowModel,
    PenetrationModel,
    PenetrationBudget,
    DiffractionModel,
    LOSS_CONVERSIONS,
    below_sensitivity_mw,
    build_model,
)
from .database import SqlGeometrySource, open_geometry_database, create_schema, add_building_outline
from .scenario import Link, LinkResult, run_links, rows_to_table, print_table
from .loaders import load_buildings_json, load_links_json
from .coverage import grid_axes, received_power_grid, render_coverage_map

__all__ = [
    "SPEED_OF_LIGHT",
    "dbm_to_mw",
    "mw_to_dbm",
    "wavelength_m",
    "Point",
    "Segment",
    "distance",
    "midpoint",
    "intersect",
    "segments_cross",
    "BuildingRecord",
    "CornerRow",
    "GeometrySource",
    "InMemoryGeometrySource",
    "Offset",
    "Corner",
    "Wall",
    "Building",
    "BuildingCache",
    "build_from_source",
    "OcclusionEngine",
    "friis_power",
    "friis_received_power",
    "max_range_m",
    "fresnel_parameter",
    "knife_edge_loss_db",
    "TwoRayParams",
    "PenetrationParams",
    "DiffractionParams",
    "MapParams",
    "ShadowingParameters",
    "parse_ini_text_to_params",
    "load_params_from_ini_file",
    "load_params_from_json_file",
    "params_from_dict",
    "ModelKind",
    "PropagationModel",
    "FreeSpaceModel",
    "TwoRayInterferenceModel",
    "ShadowModel",
    "PenetrationModel",
    "PenetrationBudget",
    "DiffractionModel",
    "LOSS_CONVERSIONS",
    "below_sensitivity_mw",
    "build_model",
    "SqlGeometrySource",
    "open_geometry_database",
    "create_schema",
    "add_building_outline",
    "Link",
    "LinkResult",
    "run_links",
    "rows_to_table",
    "print_table",
    "load_buildings_json",
    "load_links_json",
    "grid_axes",
    "received_power_grid",
    "render_coverage_map",
]
