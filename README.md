# cellmodels

Tools for analysing and recording two-dimensional cell and particle
simulations in periodic domains, such as Voronoi and vertex models or
self-propelled particles.

## Contents

- `cellmodels.autocorrelator.Autocorrelator`: a multiple-tau correlator that
  computes time autocorrelation functions on the fly. It adds levels as
  needed, so there is no fixed maximum lag. `evaluate(normalize)` returns a
  list of `(time, value)` pairs and also stores it in `correlator`.
- `cellmodels.log_spaced.LogSpacedIntegers`: steps through distinct integers
  spaced roughly evenly on a log scale (`next_save`, `update()`). This is
  useful for choosing which frames to save.
- `cellmodels.structural.StructuralFeatures`: works on periodic point
  patterns. `radial_distribution_function` and `structure_factor` return
  arrays of `(r, g)` and `(k, S)` rows. `bond_order_parameter` returns the
  mean psi_n as a complex number.
- `cellmodels.dynamical.DynamicalFeatures`: measures particle positions
  against their initial positions. It provides `msd`, `overlap_function`,
  `sisf`, `fs_chi4` and `orientational_correlation_function`, plus the
  cage-relative variants `cage_relative_msd`, `cage_relative_sisf` and
  `cage_relative_fs_chi4`. The cage neighbour lists are set with
  `set_cage_neighbors`.
- `cellmodels.record_store.RecordStore`: one SQLite file holding named
  datasets. Header datasets are small one-dimensional arrays. Extendable
  datasets are tables with a fixed row width, and each call to
  `extend_dataset` appends one row. Values are stored as int32, float32 or
  float64. `FileMode` (`READONLY`, `READWRITE`, `REPLACE`) sets how the file
  is opened. A store can be used as a context manager.
- `cellmodels.value_vector.ValueVectorDatabase`: a record store in which each
  record holds one scalar and one vector of fixed length.
- `cellmodels.model_databases.SimpleVoronoiDatabase`: writes and reads
  snapshots of Voronoi model states.
- `cellmodels.model_databases.SimpleVertexDatabase`: writes snapshots of
  vertex model states.
- `cellmodels.text_voronoi.TextVoronoiDatabase`: a tab-delimited text log of
  Voronoi model frames, written one after another.
- `cellmodels.log_writer.LogEquilibrationStateWriter`: writes states to
  several databases, each on its own log-spaced schedule starting at its own
  frame offset.
- `cellmodels.delaunay`:
  - `periodic_triangulation(points, bxx, bxy, byx, byy)` returns every
    point's Delaunay neighbours in a periodic domain with a general box
    matrix. It does this by triangulating the nine-sheeted covering.
  - `local_triangulation(points)` returns the neighbours of the first point
    in an open domain.

  Both return neighbours in counterclockwise order.

Periodic boxes and model states are supplied by the caller. Each module
describes the attributes and methods it expects as a `typing.Protocol`. For
example, a box needs `min_dist(a, b)` and `box_dims()`.

## What this package does not do

- It does not contain the simulation models or the equations of motion.
  There are no Voronoi or vertex energy functionals, no integrators and no
  minimisers. It only analyses and records states that come from elsewhere.
- It does not provide a command-line program.
- `SimpleVertexDatabase` only writes. It cannot read states back.
- `TextVoronoiDatabase` only appends frames. It cannot read them back.
- Record stores are SQLite files, not HDF5 or netCDF files.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
import math

from cellmodels.autocorrelator import Autocorrelator

corr = Autocorrelator(16, 2, 0.1)
for step in range(1000):
    corr.add(math.sin(0.05 * step))
for time, value in corr.evaluate(False):
    print(time, value)
```