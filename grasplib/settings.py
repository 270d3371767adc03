import os
import json
from dataclasses import dataclass, fields
import numpy as np
from grasp_models.grasp_data import GraspData
from grasplib.spacing import MIN_GRASP_DISTANCE

GENERATOR_SECTION = "Grasp Generator"
GRASP_DATA_SECTION = "Grasp Data"
DEFAULT_SETTINGS_PATH = 'settings.json'


class NumpyArrayEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        else:
            return super(NumpyArrayEncoder, self).default(obj)


def write_settings(settings, path=DEFAULT_SETTINGS_PATH):
    with open(path, 'w') as F:
        json.dump(settings, F, indent=2, cls=NumpyArrayEncoder)


def read_settings(path=DEFAULT_SETTINGS_PATH):
    if not os.path.isfile(path):
        return {}
    with open(path, 'r') as F:
        return json.load(F)


def register_settings(settings, name, new_set):
    settings[name] = new_set
    return settings


@dataclass(frozen=True)
class GeneratorSettings:
    verbose: bool = False
    show_grasp_arrows: bool = False
    show_prefiltered_grasps: bool = False
    show_prefiltered_grasps_speed: float = 0.01
    # loaded for the optional SpacingFilter, not used by the sampling itself
    m_between_grasps: float = MIN_GRASP_DISTANCE
    m_between_depth_grasps: float = MIN_GRASP_DISTANCE

    @classmethod
    def from_dict(cls, data: dict):
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def load_generator_settings(path=DEFAULT_SETTINGS_PATH) -> GeneratorSettings:
    return GeneratorSettings.from_dict(read_settings(path).get(GENERATOR_SECTION, {}))


def load_grasp_data(path=DEFAULT_SETTINGS_PATH, **overrides) -> GraspData:
    data = dict(read_settings(path).get(GRASP_DATA_SECTION, {}))
    data.update(overrides)
    return GraspData.from_dict(data)
