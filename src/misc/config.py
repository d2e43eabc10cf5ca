import yaml
from schema import Schema, SchemaError, And, Optional, Use

def validate_capture(data):
    if 'serial' in data and data.get('capture') != 'device':
        raise SchemaError("A device serial requires capture mode 'device'")

    return True

positive_int = And(int, lambda x: x > 0, error="PIDs must be positive integers")

config_schema = Schema(And({
    Optional("source"): str,
    "out": str,
    "pids": And([positive_int], len, error="At least one PID is required"),
    Optional("capture"): And(str, lambda x: x in ['local', 'device']),
    Optional("serial"): str,
    Optional("resolve"): {
        Optional("max_iterations"): And(int, lambda x: x > 0),
        Optional("deadline"): And(Use(float), lambda x: x > 0)
        },
    Optional("plot"): bool
    },
    validate_capture
    ))

def load_configuration(config_path):
    with open(config_path) as file:
        config = yaml.safe_load(file)

        try:
            return config_schema.validate(config)
        except SchemaError as se:
            raise se
