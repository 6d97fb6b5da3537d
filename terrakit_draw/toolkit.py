"""
GlobeToolkit - explicit context object

Owns one engine, one configuration and the three tools that act on it:

    toolkit = GlobeToolkit(engine)
    toolkit.draw       # DrawSession
    toolkit.measure    # MeasureSession (own DrawSession)
    toolkit.analysis   # SpatialAnalysisService

Several toolkits can coexist, each bound to its own engine.
"""

from pathlib import Path

from terrakit_engine.protocol import RenderingEngine
from terrakit_draw.analysis import SpatialAnalysisService
from terrakit_draw.config import ToolkitConfig
from terrakit_draw.logging import StructuredLogger, create_logger
from terrakit_draw.measure import MeasureSession
from terrakit_draw.session import DrawSession


class GlobeToolkit:
    """Drawing, measurement and analysis tools bound to one engine."""

    def __init__(
        self,
        engine: RenderingEngine,
        config: ToolkitConfig | None = None,
        logger: StructuredLogger | None = None,
    ):
        self.engine = engine
        self.config = config or ToolkitConfig()
        level = self.config.log_level_value

        self.draw = DrawSession(
            engine,
            config=self.config.draw,
            logger=logger or create_logger("draw", level),
        )
        # measurement captures vertices on its own session, independent of self.draw
        self.measure = MeasureSession(
            engine,
            draw_session=DrawSession(
                engine,
                config=self.config.draw,
                logger=logger or create_logger("measure.draw", level),
            ),
            config=self.config.measure,
            logger=logger or create_logger("measure", level),
        )
        self.analysis = SpatialAnalysisService(
            engine,
            config=self.config.analysis,
            logger=logger or create_logger("analysis", level),
        )

    @classmethod
    def from_yaml(cls, engine: RenderingEngine, yaml_path: Path) -> "GlobeToolkit":
        return cls(engine, config=ToolkitConfig.from_yaml(yaml_path))

    def clear_all(self) -> None:
        """Reset every tool: draw session, measurements and analysis entities."""
        self.measure.clear_all()
        self.draw.clear_all()
        self.analysis.clear_all_analysis_entities()

    def __repr__(self) -> str:
        return (
            f"GlobeToolkit(draw={self.draw.state.value}, "
            f"measurements={len(self.measure.results)}, "
            f"analysis_entities={len(self.analysis.get_all_analysis_entities())})"
        )
