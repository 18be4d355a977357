"""DataTable capsule: paged, searchable rows."""

from capsule_forge.schema import CapsuleDefinition

WEB = """import React, { useMemo, useState } from 'react'

type Row = Record<string, unknown>

export interface {% component %}Props {
  columns: string[]
  data: Row[]
  pageSize?: number
  selectable?: boolean
  onRowClick?: (row: Row) => void
  searchable?: boolean
  striped?: boolean
  loading?: boolean
}

export function {% component %}({
  columns,
  data,
  pageSize = {% props.pageSize %},
  selectable = {% props.selectable %},
  onRowClick,
  searchable = {% props.searchable %},
  striped = {% props.striped %},
  loading = {% props.loading %},
}: {% component %}Props) {
  const [query, setQuery] = useState('')
  const [page, setPage] = useState(0)
  const [selected, setSelected] = useState<Set<number>>(new Set())

  const rows = useMemo(() => {
    const needle = query.trim().toLowerCase()
    if (!needle) return data
    return data.filter((row) => columns.some((c) => String(row[c] ?? '').toLowerCase().includes(needle)))
  }, [data, columns, query])

  const pages = Math.max(1, Math.ceil(rows.length / pageSize))
  const visible = rows.slice(page * pageSize, (page + 1) * pageSize)

  const toggle = (index: number) => {
    const next = new Set(selected)
    if (next.has(index)) next.delete(index)
    else next.add(index)
    setSelected(next)
  }

  return (
    <div style={{ fontFamily: {% theme.typography.fontFamily %} }}>
      {searchable ? (
        <input
          placeholder="Search"
          value={query}
          onChange={(e) => {
            setQuery(e.target.value)
            setPage(0)
          }}
          style={{ marginBottom: {% theme.spacing %}, padding: 8, borderRadius: {% theme.radius %} }}
        />
      ) : null}
      <table style={{ width: '100%', borderCollapse: 'collapse' }}>
        <thead>
          <tr>
            {selectable ? <th /> : null}
            {columns.map((column) => (
              <th key={column} style={{ textAlign: 'left', color: {% theme.colors.textSecondary %} }}>
                {column}
              </th>
            ))}
          </tr>
        </thead>
        <tbody>
          {loading ? (
            <tr>
              <td colSpan={columns.length + (selectable ? 1 : 0)}>Loading…</td>
            </tr>
          ) : (
            visible.map((row, i) => {
              const index = page * pageSize + i
              return (
                <tr
                  key={index}
                  onClick={() => onRowClick?.(row)}
                  style={{ background: striped && i % 2 === 1 ? {% theme.colors.surface %} : undefined }}
                >
                  {selectable ? (
                    <td>
                      <input type="checkbox" checked={selected.has(index)} onChange={() => toggle(index)} />
                    </td>
                  ) : null}
                  {columns.map((column) => (
                    <td key={column}>{String(row[column] ?? '')}</td>
                  ))}
                </tr>
              )
            })
          )}
        </tbody>
      </table>
      <div style={{ display: 'flex', gap: 8, marginTop: 8 }}>
        <button disabled={page === 0} onClick={() => setPage(page - 1)}>Previous</button>
        <span>
          {page + 1} / {pages}
        </span>
        <button disabled={page + 1 >= pages} onClick={() => setPage(page + 1)}>Next</button>
      </div>
    </div>
  )
}

export default {% component %}
"""

IOS = """import SwiftUI

struct {% component %}: View {
    let columns: [String]
    let data: [[String: Any]]
    var pageSize: Int = {% props.pageSize %}
    var selectable: Bool = {% props.selectable %}
    var onRowClick: (([String: Any]) -> Void)? = nil
    var searchable: Bool = {% props.searchable %}
    var striped: Bool = {% props.striped %}
    var loading: Bool = {% props.loading %}

    @State private var query = ""
    @State private var page = 0
    @State private var selected = Set<Int>()

    private var rows: [[String: Any]] {
        let needle = query.trimmingCharacters(in: .whitespaces).lowercased()
        guard !needle.isEmpty else { return data }
        return data.filter { row in
            columns.contains { "\\(row[$0] ?? "")".lowercased().contains(needle) }
        }
    }

    private var pages: Int { max(1, (rows.count + pageSize - 1) / pageSize) }

    var body: some View {
        VStack(alignment: .leading, spacing: 8) {
            if searchable {
                TextField("Search", text: $query).textFieldStyle(.roundedBorder)
            }
            if loading {
                ProgressView()
            } else {
                ScrollView(.horizontal) {
                    Grid(alignment: .leading) {
                        GridRow {
                            ForEach(columns, id: \\.self) { column in
                                SwiftUI.Text(column).bold().foregroundColor({% theme.colors.textSecondary %})
                            }
                        }
                        let start = page * pageSize
                        let end = min(rows.count, start + pageSize)
                        ForEach(start..<end, id: \\.self) { index in
                            GridRow {
                                ForEach(columns, id: \\.self) { column in
                                    SwiftUI.Text("\\(rows[index][column] ?? "")")
                                }
                            }
                            .background(striped && index % 2 == 1 ? {% theme.colors.surface %} : Color.clear)
                            .onTapGesture {
                                if selectable {
                                    if selected.contains(index) { selected.remove(index) } else { selected.insert(index) }
                                }
                                onRowClick?(rows[index])
                            }
                        }
                    }
                }
            }
            HStack {
                SwiftUI.Button("Previous") { page -= 1 }.disabled(page == 0)
                SwiftUI.Text("\\(page + 1) / \\(pages)")
                SwiftUI.Button("Next") { page += 1 }.disabled(page + 1 >= pages)
            }
        }
        .padding({% theme.spacing %})
    }
}
"""

ANDROID = """import androidx.compose.foundation.background
import androidx.compose.foundation.clickable
import androidx.compose.foundation.layout.Arrangement
import androidx.compose.foundation.layout.Column
import androidx.compose.foundation.layout.Row
import androidx.compose.foundation.layout.fillMaxWidth
import androidx.compose.foundation.layout.padding
import androidx.compose.foundation.lazy.LazyColumn
import androidx.compose.foundation.lazy.itemsIndexed
import androidx.compose.material3.Checkbox
import androidx.compose.material3.LinearProgressIndicator
import androidx.compose.material3.OutlinedTextField
import androidx.compose.material3.TextButton
import androidx.compose.runtime.Composable
import androidx.compose.runtime.getValue
import androidx.compose.runtime.mutableStateOf
import androidx.compose.runtime.remember
import androidx.compose.runtime.setValue
import androidx.compose.ui.Modifier
import androidx.compose.ui.graphics.Color
import androidx.compose.ui.unit.dp

@Composable
fun {% component %}(
    columns: List<String>,
    data: List<Map<String, Any?>>,
    pageSize: Int = {% props.pageSize %},
    selectable: Boolean = {% props.selectable %},
    onRowClick: ((Map<String, Any?>) -> Unit)? = null,
    searchable: Boolean = {% props.searchable %},
    striped: Boolean = {% props.striped %},
    loading: Boolean = {% props.loading %},
    modifier: Modifier = Modifier,
) {
    var query by remember { mutableStateOf("") }
    var page by remember { mutableStateOf(0) }
    var selected by remember { mutableStateOf(setOf<Int>()) }

    val rows = if (query.isBlank()) data else data.filter { row ->
        columns.any { (row[it]?.toString() ?: "").contains(query.trim(), ignoreCase = true) }
    }
    val pages = maxOf(1, (rows.size + pageSize - 1) / pageSize)
    val visible = rows.drop(page * pageSize).take(pageSize)

    Column(modifier = modifier.padding({% theme.spacing %}.dp), verticalArrangement = Arrangement.spacedBy(8.dp)) {
        if (searchable) {
            OutlinedTextField(
                value = query,
                onValueChange = { query = it; page = 0 },
                label = { androidx.compose.material3.Text("Search") },
                modifier = Modifier.fillMaxWidth(),
            )
        }
        Row(modifier = Modifier.fillMaxWidth()) {
            columns.forEach { column ->
                androidx.compose.material3.Text(text = column, color = {% theme.colors.textSecondary %}, modifier = Modifier.weight(1f))
            }
        }
        if (loading) {
            LinearProgressIndicator(modifier = Modifier.fillMaxWidth())
        } else {
            LazyColumn {
                itemsIndexed(visible) { i, row ->
                    val index = page * pageSize + i
                    Row(
                        modifier = Modifier
                            .fillMaxWidth()
                            .background(if (striped && i % 2 == 1) {% theme.colors.surface %} else Color.Transparent)
                            .clickable { onRowClick?.invoke(row) },
                    ) {
                        if (selectable) {
                            Checkbox(
                                checked = index in selected,
                                onCheckedChange = { selected = if (it) selected + index else selected - index },
                            )
                        }
                        columns.forEach { column ->
                            androidx.compose.material3.Text(text = row[column]?.toString() ?: "", modifier = Modifier.weight(1f))
                        }
                    }
                }
            }
        }
        Row {
            TextButton(onClick = { page -= 1 }, enabled = page > 0) { androidx.compose.material3.Text("Previous") }
            androidx.compose.material3.Text("${page + 1} / $pages")
            TextButton(onClick = { page += 1 }, enabled = page + 1 < pages) { androidx.compose.material3.Text("Next") }
        }
    }
}
"""

DATA_TABLE = CapsuleDefinition.model_validate(
    {
        "id": "data-table",
        "name": "DataTable",
        "description": "Paged table with search, row selection and striping",
        "category": "data",
        "tags": ["table", "list", "grid"],
        "props": [
            {"name": "columns", "type": "array", "itemType": "string", "required": True},
            {"name": "data", "type": "array", "itemType": "object", "required": True},
            {"name": "pageSize", "type": "number", "default": 10, "min": 1, "max": 500},
            {"name": "selectable", "type": "boolean", "default": False},
            {"name": "onRowClick", "type": "action"},
            {"name": "searchable", "type": "boolean", "default": True},
            {"name": "striped", "type": "boolean", "default": True},
            {"name": "loading", "type": "boolean", "default": False},
        ],
        "platforms": {
            "web": {"code": WEB, "dependencies": ["react"]},
            "ios": {"code": IOS},
            "android": {"code": ANDROID},
        },
    }
)
