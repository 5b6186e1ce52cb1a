import argparse
import json
import asyncio
import sys
from .models import DeploymentDescriptor, UpgradeConfig
from .upgrader import NodeUpgrader, upgrade_node
from .simulation import SimulatedResourceDeleter, SimulatedTemplateDeployer, SimulatedReadinessClient
from .logger import setup_logging, get_logger


def load_descriptor(path):
    logger = get_logger("cli")
    try:
        data = json.load(open(path))
        return DeploymentDescriptor(
            template=data["template"],
            parameters=data.get("parameters", {}),
            offset_variable=data.get("offset_variable", "masterOffset"),
            count_variable=data.get("count_variable", "masterCount")
        )
    except Exception as e:
        logger.error(f"Error loading descriptor: {e}")
        raise


def result_to_dict(result):
    from dataclasses import asdict
    data = asdict(result)
    if result.validation is not None:
        data["validation"] = result.validation.value
    return data


def build_parser():
    parser = argparse.ArgumentParser(description="Control-plane node upgrader")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="cmd", required=True)

    simulate = sub.add_parser("simulate", help="Upgrade one node against simulated infrastructure")
    simulate.add_argument("--node", required=True)
    simulate.add_argument("--pool", default="master")
    simulate.add_argument("--ordinal", type=int, default=0)
    simulate.add_argument("--descriptor")
    simulate.add_argument("--ready-after", type=int, default=1,
                          help="Poll on which the node reports ready (0 = never)")
    simulate.add_argument("--failing-queries", type=int, default=0)
    simulate.add_argument("--fail-delete", action="store_true")
    simulate.add_argument("--fail-deploy", action="store_true")
    simulate.add_argument("--timeout", type=float, default=30.0)
    simulate.add_argument("--poll-interval", type=float, default=5.0)

    validate = sub.add_parser("validate", help="Wait for a node to report ready")
    validate.add_argument("--node", required=True)
    validate.add_argument("--kubeconfig", required=True)
    validate.add_argument("--endpoint", required=True)
    validate.add_argument("--timeout", type=float, default=20 * 60.0)
    validate.add_argument("--poll-interval", type=float, default=5.0)
    return parser


def run_simulation(args):
    if args.descriptor:
        descriptor = load_descriptor(args.descriptor)
    else:
        descriptor = DeploymentDescriptor(template={"variables": {}})
    config = UpgradeConfig(
        subscription_id="simulated",
        resource_group="simulated",
        endpoint="simulated.local",
        timeout_s=args.timeout,
        poll_interval_s=args.poll_interval
    )
    upgrader = NodeUpgrader(
        config,
        descriptor,
        SimulatedResourceDeleter(fail=args.fail_delete),
        SimulatedTemplateDeployer(fail=args.fail_deploy),
        SimulatedReadinessClient(ready_after=args.ready_after or None, failing_queries=args.failing_queries)
    )
    return asyncio.run(upgrade_node(upgrader, args.node, args.pool, args.ordinal))


def run_validation(args):
    from .kube import KubeReadinessClient
    with open(args.kubeconfig) as f:
        kubeconfig = f.read()
    config = UpgradeConfig(
        subscription_id=None,
        resource_group=None,
        kubeconfig=kubeconfig,
        endpoint=args.endpoint,
        timeout_s=args.timeout,
        poll_interval_s=args.poll_interval
    )
    upgrader = NodeUpgrader(config, None, None, None, KubeReadinessClient())
    return asyncio.run(upgrader.validate(args.node))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.cmd == "simulate":
        try:
            result = run_simulation(args)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(json.dumps(result_to_dict(result), indent=2))
        if not result.success:
            sys.exit(1)

    if args.cmd == "validate":
        try:
            outcome = run_validation(args)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(outcome.value)

if __name__ == "__main__":
    main()
