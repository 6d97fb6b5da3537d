from datetime import datetime
from pathlib import Path


def get_target_run_folder(application_name: str, root: str = "./runs") -> Path:
    # runs is datetime generated folder in the application name folder
    target_run_folder = Path(root) / application_name / datetime.now().strftime('%Y%m%d_%H%M%S')
    target_run_folder.mkdir(parents=True, exist_ok=True)
    return target_run_folder
