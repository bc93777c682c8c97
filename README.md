# scadvisor

`scadvisor` holds the data model and supporting helpers of a scaling
advisor for Kubernetes clusters. It describes what a cluster may scale
into (node pools, node templates, priorities, quotas), the advice that
comes back (scale-out and scale-in plans), and feedback about failed
scaling. It also has helpers for API objects held as plain Python
dictionaries: resource quantities, patches, pod and node construction,
label selectors, and an in-memory event sink.

The package needs Python 3.10 or later. Its only dependency is PyYAML.

## Modules

| Module | Contents |
| --- | --- |
| `scadvisor.errors` | Exceptions rooted at `AdvisorError`, and `as_generate_error` |
| `scadvisor.common_types` | Shared constants (label keys, default ports), `HostPort`, `ServerConfig`, `QPSBurst`, `ConstraintReference`, the enums `NodeScoringStrategy`, `CloudProvider` and `ClientAccessMode`, the abstract `Service`, and `as_cloud_provider` |
| `scadvisor.config` | Operator configuration `ScalingAdvisorConfiguration` and its parts, the `set_defaults*` functions, `FieldError` and `validate_scaling_advisor_configuration` |
| `scadvisor.core` | `ClusterScalingConstraint`, `ClusterScalingAdvice`, `ClusterScalingFeedback` and their parts, `GroupVersionKind`, `known_kinds` |
| `scadvisor.minkapi` | `MinKAPIConfig`, `WatchConfig`, `ViewType`, `LabelSelector`, `parse_label_selector`, `selector_from_set`, `MatchCriteria` |
| `scadvisor.cli` | `argparse` helpers: `add_server_config_arguments`, `add_qps_burst_arguments`, `validate_server_config`, `parse_duration`, `print_version`, `handle_error_and_exit`, `ExitCode` |
| `scadvisor.minkapi_cli` | `Options`, `add_watch_config_arguments`, `parse_program_flags` |
| `scadvisor.service` | Advice requests and responses, `ClusterSnapshot`, `PodInfo`, `NodeInfo`, node scores and simulation results |
| `scadvisor.objutil` | Quantities, merge and strategic merge patches, YAML files, resource versions, `generate_name`, `cast` |
| `scadvisor.podutil` | Pod conditions, `as_pod`, request aggregation |
| `scadvisor.nodeutil` | `as_node`, `compute_allocatable`, `build_ready_conditions`, `create_node_labels` |
| `scadvisor.eventsink` | `InMemEventSink` |

## Operator configuration

```python
from scadvisor.config import (
    ScalingAdvisorConfiguration,
    set_defaults,
    validate_scaling_advisor_configuration,
)

config = ScalingAdvisorConfiguration()
set_defaults(config)
for problem in validate_scaling_advisor_configuration(config):
    print(problem)
```

`set_defaults` fills only unset values: client QPS 100 and burst 120;
leader election lease 15s, renew deadline 10s, retry period 2s, lock
`leases` and resource name `scalingadvisor-operator-leader-election`;
server port 8080, graceful shutdown 5s, health probe port 8081, metrics
port 8082, profiling port 8083; and one concurrent sync for the
constraints controller.

Validation returns a list of `FieldError` values, empty when the
configuration is valid. It rejects a negative burst and, when leader
election is enabled, non-positive durations, a lease duration not longer
than the renew deadline, and a missing resource lock, namespace or name.

## Scaling resources

```python
from scadvisor.core import ClusterScalingConstraint

constraint = ClusterScalingConstraint.from_dict({
    "metadata": {"name": "shoot-a", "namespace": "default"},
    "spec": {
        "consumerID": "lifecycle-manager",
        "adviceGenerationMode": "Incremental",
        "nodePools": [{
            "name": "pool-a",
            "region": "eu-west-1",
            "availabilityZones": ["eu-west-1a"],
            "nodeTemplates": [{"name": "nt-a", "instanceType": "m5.large",
                               "capacity": {"cpu": "2", "memory": "8Gi"}}],
            "defaultBackoffPolicy": {"initialBackoff": "30s", "maxBackoff": "5m"},
        }],
    },
})
document = constraint.to_dict()
```

`ClusterScalingConstraint`, `ClusterScalingAdvice` and
`ClusterScalingFeedback` convert to and from dictionaries with the API's
camel-case field names. Durations use the compact `1h2m3.5s` notation.

## Cloud providers

```python
from scadvisor.common_types import as_cloud_provider
from scadvisor.errors import UnsupportedCloudProviderError

provider = as_cloud_provider("aws")
try:
    as_cloud_provider("moon")
except UnsupportedCloudProviderError as exc:
    print(exc)
```

## Selecting objects

```python
from scadvisor.minkapi import MatchCriteria, parse_label_selector, selector_from_set

web_pods = MatchCriteria(namespace="default", label_selector=selector_from_set({"app": "web"}))
tiered = parse_label_selector("tier in (frontend, backend), env!=dev")
```

Selectors support `=`, `==`, `!=`, `in`, `notin`, `>`, `<`, a bare key
(exists) and `!key` (does not exist). `MatchCriteria.matches` accepts an
object with a `metadata` attribute or key, or the metadata itself; an
empty namespace, an empty name set or no selector matches anything.

## Command-line options

`scadvisor.minkapi_cli.parse_program_flags(args)` parses options such as
`--kubeconfig/-k` (defaulting to `$KUBECONFIG`, then `/tmp/minkapi.yaml`),
`--host/-H`, `--port/-P` (default 8091), `--pprof/-p`,
`--shutdown-timeout`, `--watch-queue-size/-s`, `--watch-timeout/-t` and
`--base-prefix/-b`, and returns `Options`. Bad input raises
`InvalidOptionError` or `MissingOptionError`; `-h` raises `SystemExit`,
which `scadvisor.cli.handle_error_and_exit` turns into exit code 0.

## Objects, quantities and patches

```python
from scadvisor.objutil import (
    PatchType, int_map_to_resource_list, patch_object, resource_list_to_int_map,
)

as_ints = resource_list_to_int_map({"cpu": "2", "memory": "1024", "ephemeral-storage": "100Mi"})
back = int_map_to_resource_list(as_ints)

event = {"metadata": {"name": "pod-a.1", "namespace": "default"}}
patch_object(event, "default/pod-a.1", PatchType.MERGE, '{"series": {"count": 2}}')
```

Objects are plain dictionaries. `patch_object` supports merge patches and
a strategic merge that merges lists such as `conditions` and `containers`
by their key field; other patch types raise `PatchError`.
`patch_object_status` applies only the `status` part of a patch.

## Recording events

```python
from scadvisor.eventsink import InMemEventSink

sink = InMemEventSink()
sink.create({"metadata": {"name": "pod-a.1", "namespace": "default"}, "reason": "Scheduled"})
print(len(sink.list()))
sink.reset()
```

Events are found by namespace and name; updating or patching a missing
event raises `NotFoundError`.

## Errors

Every failure the package reports raises a subclass of
`scadvisor.errors.AdvisorError`, except malformed selectors, durations
and resource versions, which raise `ValueError`.

## What the package does not do

The package installs no command and runs no server. It has no in-memory
API object store, views, watches or Kubernetes clients, does not launch a
scheduler or run simulations, and does not generate scaling advice: it
provides the types, configuration handling and helpers such a system
would use. `Service` is only an abstract base class.