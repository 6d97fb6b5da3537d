"""
Replays a scripted measuring session on the headless engine and records it.

Every pointer event produces one frame, so the video shows the live preview
following the cursor, the finalized geometry and the measurement labels.
"""

import cv2
import numpy as np
import supervision as sv

from terrakit_engine import EquirectangularPicker, HeadlessEngine, SceneVisualizer, ScreenPoint
from terrakit_draw import GlobeToolkit
from utils import get_target_run_folder

# Paris, around the Champ de Mars
VIEWPORT = EquirectangularPicker(
    width=960, height=640, west=2.280, south=48.845, east=2.310, north=48.865
)

DISTANCE_PATH = [(2.2945, 48.8584), (2.2980, 48.8560), (2.3010, 48.8530)]
AREA_RING = [(2.2900, 48.8600), (2.2960, 48.8620), (2.3000, 48.8570), (2.2930, 48.8550)]
BUFFER_CENTER = [2.2945, 48.8584]
BUFFER_RADIUS_M = 300.0


class SessionRecorder:
    """
    Drives the engine with screen events and captures one frame per event.

    Design: Single Responsibility - only turns lon/lat into pointer events and
    collects frames; the toolkit does the actual work.
    """

    def __init__(self, engine: HeadlessEngine, visualizer: SceneVisualizer):
        self.engine = engine
        self.visualizer = visualizer
        self.frames = []
        self._cursor = ScreenPoint(VIEWPORT.width / 2, VIEWPORT.height / 2)

    def _capture(self):
        self.frames.append(self.visualizer.render(self.engine))

    def move_to(self, lon: float, lat: float, steps: int = 8):
        """Glide the cursor to a position, one frame per mouse-move."""
        target = VIEWPORT.to_screen(lon, lat)
        for t in np.linspace(0.0, 1.0, steps)[1:]:
            self.engine.move(ScreenPoint(
                self._cursor.x + (target.x - self._cursor.x) * t,
                self._cursor.y + (target.y - self._cursor.y) * t,
            ))
            self._capture()
        self._cursor = target

    def click(self, lon: float, lat: float):
        self.move_to(lon, lat)
        self.engine.click(VIEWPORT.to_screen(lon, lat))
        self._capture()

    def finish(self):
        self.engine.right_click(self._cursor)
        self._capture()

    def hold(self, count: int = 10):
        for _ in range(count):
            self._capture()


def record_session(recorder: SessionRecorder, toolkit: GlobeToolkit):
    toolkit.measure.measure_distance(on_complete=lambda r: print(f"{r.id}: {r.display_text}"))
    for lon, lat in DISTANCE_PATH:
        recorder.click(lon, lat)
    recorder.finish()
    recorder.hold()

    toolkit.measure.measure_area(on_complete=lambda r: print(f"{r.id}: {r.display_text}"))
    for lon, lat in AREA_RING:
        recorder.click(lon, lat)
    recorder.finish()
    recorder.hold()

    buffer_id = toolkit.analysis.create_buffer(BUFFER_CENTER, BUFFER_RADIUS_M)
    print(f"buffer {buffer_id}: {BUFFER_RADIUS_M:.0f} m")
    recorder.hold(20)


def main():
    target_run_folder = get_target_run_folder(application_name="measure_demo")
    target_video_path = target_run_folder / "session.mp4"
    target_image_path = target_run_folder / "final.png"

    engine = HeadlessEngine(picker=VIEWPORT)
    toolkit = GlobeToolkit(engine)
    recorder = SessionRecorder(engine, SceneVisualizer(projection=VIEWPORT))

    record_session(recorder, toolkit)

    video_info = sv.VideoInfo(width=VIEWPORT.width, height=VIEWPORT.height, fps=15)
    with sv.VideoSink(target_path=str(target_video_path), video_info=video_info) as out_video_sink:
        for frame in recorder.frames:
            out_video_sink.write_frame(frame)
    cv2.imwrite(str(target_image_path), recorder.frames[-1])

    print(f"Demo completed. Output: {target_video_path}")


if __name__ == "__main__":
    main()
