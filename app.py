"""
Main application for the keyword engine - wires the catalog, engine and monitoring
"""
import argparse
import json
import logging
from typing import Any, Dict, List, Optional

import uvicorn

from config import config
from catalog import KeywordCatalog
from engine import KeywordEngine
from monitoring import init_monitoring

logger = logging.getLogger(__name__)

class KeywordEngineApp:
    """Keyword engine application"""

    def __init__(self, engine: Optional[KeywordEngine] = None, seed_samples: bool = None):
        self.engine = engine or KeywordEngine()
        self.catalog = KeywordCatalog(self.engine)

        self.metrics_collector, self.health_checker = init_monitoring(
            self.catalog, config.log_level, config.log_dir
        )
        self.catalog.metrics = self.metrics_collector

        if config.seed_sample_data if seed_samples is None else seed_samples:
            self.catalog.seed_sample_data()

        logger.info("Keyword engine application initialized")

    def classify(self, volume: float) -> Dict[str, Any]:
        tier = self.engine.classify(volume)
        return {"search_volume": volume, "priority": tier.value,
                "priority_info": self.engine.tier_info(tier).to_dict()}

    def score(self, text: str) -> Dict[str, Any]:
        analysis = self.engine.score(text)
        self.metrics_collector.record_score()
        return {"keyword": text, "analysis": analysis.to_dict()}

    def list_tiers(self) -> List[Dict[str, Any]]:
        return [tier.to_dict() for tier in self.engine.list_configuration()]

    def get_distribution(self) -> Dict[str, Any]:
        return self.catalog.distribution().to_dict()

    def get_aio_stats(self) -> Dict[str, Any]:
        return {tier.value: stats.to_dict() for tier, stats in self.catalog.aio_stats().items()}

    def get_system_status(self) -> Dict[str, Any]:
        """Get comprehensive system status"""
        health = self.health_checker.check_health()
        return {
            "timestamp": health["timestamp"],
            "health": health,
            "keywords": self.catalog.count(),
            "metrics": self.metrics_collector.get_metrics(),
        }

    def shutdown(self):
        logger.info("Shutting down keyword engine application")

def create_cli():
    """Create command line interface"""
    parser = argparse.ArgumentParser(description="Keyword engine - priority tiers and AIO adaptability scoring")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    classify_parser = subparsers.add_parser("classify", help="Classify search volumes into priority tiers")
    classify_parser.add_argument("volumes", nargs="+", type=int, help="Monthly search volumes")

    score_parser = subparsers.add_parser("score", help="Score keywords for AIO adaptability")
    score_parser.add_argument("keywords", nargs="+", help="Keyword phrases (quote multi-word phrases)")

    subparsers.add_parser("tiers", help="Show the priority tier configuration")
    subparsers.add_parser("distribution", help="Show the tier distribution of the sample catalog")
    subparsers.add_parser("status", help="Get system status")

    server_parser = subparsers.add_parser("server", help="Run the REST API")
    server_parser.add_argument("--host", default=config.api_host, help="Bind address")
    server_parser.add_argument("--port", type=int, default=config.api_port, help="Server port")

    return parser

def main(argv: Optional[List[str]] = None):
    """Main application entry point"""
    parser = create_cli()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.command == "server":
        uvicorn.run("api:app", host=args.host, port=args.port, log_level=config.log_level.lower())
        return

    app = KeywordEngineApp(seed_samples=args.command in ("distribution", "status"))

    try:
        if args.command == "classify":
            result = [app.classify(volume) for volume in args.volumes]
        elif args.command == "score":
            result = [app.score(keyword) for keyword in args.keywords]
        elif args.command == "tiers":
            result = app.list_tiers()
        elif args.command == "distribution":
            result = {"distribution": app.get_distribution(), "aio_stats": app.get_aio_stats()}
        else:
            result = app.get_system_status()
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
    finally:
        app.shutdown()

if __name__ == "__main__":
    main()
