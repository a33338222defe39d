# slinkykit

Plain-Python building blocks for writing a cluster operator. It has helpers
that read pod state and annotations, a registry of cluster clients,
thread-safe keyed stores for durations and times, and slow-start batching.
It also has controller revision history and pod creation from templates,
both built on an in-memory object store. Objects are plain dictionaries
shaped like API manifests (`kind`, `apiVersion`, `metadata`, `spec`,
`status`). The package has no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What is inside

| Module | Purpose |
| --- | --- |
| `slinkykit.listutil` | `reference_list`, `dereference_list` and the `Ref` wrapper |
| `slinkykit.annotations` | `get_number_from_annotations`, `get_bool_from_annotations`, `get_time_from_annotations` |
| `slinkykit.numeric` | `clamp`, `get_scaled_value_from_int_or_percent` |
| `slinkykit.meta` | `NamespacedName`, `key_func` |
| `slinkykit.pods` | `PodPhase` and predicates: `is_pod_ready`, `is_running_and_ready`, `is_running_and_available`, `is_created`, `is_pending`, `is_failed`, `is_succeeded`, `is_terminating`, `is_healthy` |
| `slinkykit.batch` | `slow_start_batch`, `SlowStartError` |
| `slinkykit.durationstore` | `DurationStore` with the `greater` / `less` policies |
| `slinkykit.timestore` | `TimeStore` with the `greater` / `less` policies; missing keys read as `ZERO_TIME` |
| `slinkykit.podinfo` | `PodInfo` (with `to_json`), `parse_pod_info` |
| `slinkykit.clusters` | `Clusters`, a registry that starts each client on a background thread and stops it on removal or replacement |
| `slinkykit.revisions` | `set_revision`, `get_revision` for the `controller-revision-hash` label |
| `slinkykit.client` | `ObjectClient` (in-memory store), `ApiError`, `NotFoundError`, `AlreadyExistsError`, `ConflictError`, `InvalidError`, `retry_on_conflict` |
| `slinkykit.historycontrol` | `HistoryControl`, `hash_controller_revision`, `controller_revision_name`, `get_controller_of` |
| `slinkykit.podcontrol` | `PodControl`, `EventRecorder`, `get_pod_from_template`, `validate_controller_ref` |

## Examples

Read values from annotations. An invalid value raises `ValueError`, and a
missing key gives the zero value:

```python
from slinkykit.annotations import get_number_from_annotations, get_bool_from_annotations

get_number_from_annotations({"replicas": "3"}, "replicas")   # 3
get_number_from_annotations({}, "replicas")                  # 0
get_bool_from_annotations({"cordon": "True"}, "cordon")      # True
```

Keep the largest duration pushed for a key until someone pops it:

```python
from datetime import timedelta
from slinkykit.durationstore import DurationStore, greater

store = DurationStore(greater)
store.push("node-0", timedelta(seconds=1))
store.push("node-0", timedelta(minutes=-1))
store.peek("node-0")   # timedelta(seconds=1)
store.pop("node-0")    # timedelta(seconds=1)
store.pop("node-0")    # timedelta(0)
```

Run work in batches that double in size while the calls succeed:

```python
from slinkykit.batch import slow_start_batch, SlowStartError

def create(index):
    ...

try:
    created = slow_start_batch(10, 1, create)
except SlowStartError as err:
    print(err.successes, "succeeded before", err.error)
```

Clamp a value. The bounds can be given in either order:

```python
from slinkykit.numeric import clamp

clamp(0, 10, -10)   # 0
```

Create a pod from a template in the in-memory store and record the events:

```python
from slinkykit.client import ObjectClient
from slinkykit.podcontrol import EventRecorder, PodControl

client = ObjectClient()
recorder = EventRecorder()
control = PodControl(client, recorder)

owner = {"kind": "NodeSet", "metadata": {"name": "workers", "namespace": "default", "uid": "1"}}
ref = {"apiVersion": "v1", "kind": "NodeSet", "name": "workers", "uid": "1",
       "controller": True, "blockOwnerDeletion": True}
template = {"metadata": {"labels": {"app": "worker"}}, "spec": {"containers": []}}

pod = control.create_pods("default", template, owner, ref)
pod["metadata"]["name"]   # "workers-" followed by a generated suffix
recorder.events           # [("Normal", "SuccessfulCreate", "Created pod: workers-...")]
```

Store controller revisions under hashed names:

```python
from slinkykit.client import ObjectClient
from slinkykit.historycontrol import HistoryControl

history = HistoryControl(ObjectClient())
parent = {"metadata": {"name": "workers", "namespace": "default", "uid": "1"}}
revision, collisions = history.create_controller_revision(
    parent, {"metadata": {"labels": {"app": "worker"}}, "data": {"spec": 1}, "revision": 1}, 0
)
history.list_controller_revisions(parent, {"app": "worker"})   # [revision]
```

## What it does not do

- It does not talk to a real API server. `ObjectClient` keeps objects in
  memory; `PodControl` and `HistoryControl` work only against it.
- `ObjectClient.patch` and `PodControl.patch_pod` apply JSON merge patches,
  not strategic merge patches.
- It has no controllers, reconcile loops or watches, and no command-line
  program.