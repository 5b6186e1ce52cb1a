import logging

def setup_logging(level="INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                       format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

def get_logger(name="node_upgrade"):
    return logging.getLogger(f"node_upgrade.{name}" if name != "node_upgrade" else name)
