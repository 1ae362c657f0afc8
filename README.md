# bandfit

`bandfit` reads measurement columns from an `.xlsx` workbook and fits each
one with an inverted Gaussian band on a straight-line baseline:

    y(x) = -A * exp(-(x - mu)^2 / (2 * sigma^2)) + b * x + offset

The fit is a bounded least-squares fit (`sigma` is kept at or above `1e-6`).
Each fitted column gives the five parameters `A`, `mu`, `sigma`, `b`,
`offset` and the root-mean-square error of the fit (`RMSE`).

A workbook is expected to have two sheets, `NG` and `OK`. In every sheet the
first 90 columns and the first 1000 rows are scanned. Numeric cells of a
column are its samples, with the row number as `x`; text, boolean and error
cells are skipped. A column is fitted only when it holds at least five
numeric cells.

The two groups can then be compared per parameter, as a box plot
(min, quartiles, median, max of NG against OK) or as a scatter plot of the
values by row index.

## Installing

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Command line

    bandfit WORKBOOK [--ng-sheet NAME] [--ok-sheet NAME] [-o FILE]
                     [--chart {box,scatter} --parameter NAME --save IMAGE]

The command loads the two sheets (`NG` and `OK` unless `--ng-sheet` /
`--ok-sheet` say otherwise), fits every column and writes the results as
two tab-separated tables, titled `NG 결과` and `OK 결과`, with CRLF line
endings, ready to paste into a spreadsheet. They go to standard output, or
to the file given with `-o/--output`.

`--chart` draws a chart of one result column for both groups and needs
`--parameter` (one of `A`, `mu`, `sigma`, `b`, `offset`, `RMSE`) and
`--save` (the image file to write; matplotlib picks the format from its
extension).

A sheet that cannot be read is reported on standard error and treated as
empty. The exit status is 1 when neither sheet could be read or the chart
could not be saved, and 0 otherwise.

## Library use

### Fitting

```python
from bandfit.model import fit_gaussian_with_bias, initial_guess

xs = [1, 2, 3, 4, 5, 6, 7, 8, 9]
ys = [5.0, 4.9, 4.2, 2.8, 1.9, 2.9, 4.1, 4.8, 5.0]
result = fit_gaussian_with_bias(xs, ys)
result.params      # (A, mu, sigma, b, offset)
result.rmse
result.converged
```

`initial_guess(xs, ys)` gives the starting point: `A` from the range of `y`,
`mu` the mean of `x`, `sigma` a sixth of the `x` range (at least `1e-6`),
`b` zero and `offset` the smallest `y`. `gaussian_with_bias(x, params)` and
`residual(x, y, params)` evaluate the model and observed-minus-model for a
scalar or an array. Mismatched or empty inputs raise `ValueError`.

### Workbooks and result tables

```python
from bandfit.results import load_results, format_table, clipboard_text

ng = load_results("measurements.xlsx", "NG")   # a ResultTable
ok = load_results("measurements.xlsx", "OK")
print(format_table(ng, "NG"))
text = clipboard_text([("NG", ng), ("OK", ok)])
sigmas = ng.column("sigma")
```

`bandfit.xlsx.read_numeric_columns(path, sheet_name)` returns the numeric
cells of a sheet as `{column: [(row, value), ...]}` and raises
`WorkbookError` when the workbook or the sheet cannot be read.
`fit_columns` fits such a mapping into a `ResultTable`, whose rows are
`ColumnFit` entries labelled `column N`. `ResultTable.column(name)` returns
the values under a header as shown with five decimals, and raises `KeyError`
for an unknown header.

### Charts

`bandfit.charts.scatter_chart(ng, ok, title)` and
`bandfit.charts.box_chart(ng, ok, title)` return matplotlib `Figure`s of
800×600 pixels. `box_stats` gives the five-number summary each box uses,
`y_axis_range` the box chart's value-axis bounds and tick step, and
`estimate_step` a round tick step (1, 2, 5 or 10 times a power of ten).
`Viewport.zoom(delta)` zooms a fractional view by 10% around its centre.

### Interactive view state

`bandfit.viewer.ChartViewer` models mouse-driven zooming and scrolling of a
chart: `mouse_down`, `mouse_move`, `mouse_up` and `mouse_wheel_zoom` act on
its `ViewPort` according to its `MouseUsage` and `Direction` settings, and
`update_view_port` / `on_timer` pace the viewport-changed callback.
`bandfit.navigator.ViewPortControl` is the matching overview control that
moves, resizes or recentres the viewer's viewport. `bandfit.geometry` holds
the shared coordinate helpers (`ImageScale`, `Rect`, `Point`,
`drag_zoom_rect`, `tooltip_position` and others).

## What it does not do

There is no window or graphical interface. `ChartViewer` and
`ViewPortControl` keep the state of an interactive view and are driven by
calling their methods; they draw nothing themselves. Results are not put on
the system clipboard: the command writes the table text to standard output
or a file, and charts are only saved to image files.