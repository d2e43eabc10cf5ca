import json
import os


def write_json(file_path, data):
    with open(file_path, 'w') as file:
        json.dump(data, file, indent=4)


def create_directory(path):
    os.makedirs(path, exist_ok=True)
    return path
