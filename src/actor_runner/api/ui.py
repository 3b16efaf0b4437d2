from __future__ import annotations

from html import escape


def render_homepage(*, app_name: str) -> str:
    title = escape(app_name)
    return f"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title} Console</title>
  <style>
    body {{
      margin: 0;
      font-family: system-ui, sans-serif;
      background: #f4f4f0;
      color: #222;
    }}
    main {{ max-width: 860px; margin: 0 auto; padding: 24px 16px; }}
    .panel {{ background: #fff; border: 1px solid #ccc; border-radius: 6px; padding: 14px; margin-bottom: 14px; }}
    .hint {{ color: #666; }}
    label {{ display: block; margin: 10px 0 2px; font-weight: bold; }}
    input, select, textarea {{ width: 100%; box-sizing: border-box; padding: 6px; font: inherit; }}
    textarea, pre {{ font-family: ui-monospace, monospace; }}
    textarea {{ min-height: 64px; }}
    button {{ margin-top: 10px; padding: 6px 14px; }}
    .actor {{ padding: 8px; border: 1px solid #ccc; margin-top: 6px; cursor: pointer; }}
    .actor.selected {{ border-color: #2a5db0; background: #eef3fb; }}
    pre {{ background: #f7f7f7; padding: 8px; overflow-x: auto; }}
    #status.ok {{ color: #1d7a35; }}
    #status.error {{ color: #b02a2a; }}
  </style>
</head>
<body>
  <main>
    <section class="panel">
      <h1>{title}</h1>
      <p class="hint">Connect an API token, pick an actor, fill its input form and run it.</p>
      <label for="apiKey">API token</label>
      <input id="apiKey" type="password" autocomplete="off">
      <button id="connectBtn">Connect</button>
      <p id="status" class="hint"></p>
    </section>

    <section class="panel">
      <h2>Actors</h2>
      <div id="actors" class="hint">Not connected.</div>
    </section>

    <section class="panel">
      <h2>Input</h2>
      <form id="inputForm"></form>
      <button id="runBtn" disabled>Run actor</button>
    </section>

    <section class="panel">
      <h2>Results</h2>
      <div id="runInfo" class="hint">No run yet.</div>
      <div id="results"></div>
    </section>
  </main>

  <script>
    const session = {{ apiKey: "", actor: null, schema: null }};
    const statusEl = document.getElementById("status");

    function setStatus(message, kind = "") {{
      statusEl.textContent = message;
      statusEl.className = kind || "hint";
    }}

    async function callApi(url, method = "GET", body = undefined) {{
      const headers = {{ "Content-Type": "application/json" }};
      if (session.apiKey) headers["Authorization"] = `Bearer ${{session.apiKey}}`;
      const response = await fetch(url, {{
        method,
        headers,
        body: body === undefined ? undefined : JSON.stringify(body),
      }});
      const data = await response.json();
      if (!response.ok) throw new Error(data.error || `Request failed (${{response.status}})`);
      return data;
    }}

    function fieldControl(key, prop) {{
      const value = prop.default;
      switch (prop.type) {{
        case "string":
          if (Array.isArray(prop.enum)) {{
            const select = document.createElement("select");
            prop.enum.forEach((option) => {{
              const el = document.createElement("option");
              el.value = option;
              el.textContent = option;
              el.selected = option === value;
              select.appendChild(el);
            }});
            return select;
          }}
          return Object.assign(document.createElement("input"), {{ type: "text", value: value ?? "" }});
        case "number":
        case "integer":
          return Object.assign(document.createElement("input"), {{ type: "number", value: value ?? "" }});
        case "boolean": {{
          const select = document.createElement("select");
          ["true", "false"].forEach((option) => {{
            const el = document.createElement("option");
            el.value = option;
            el.textContent = option;
            el.selected = String(value === true) === option;
            select.appendChild(el);
          }});
          return select;
        }}
        case "array":
        case "object": {{
          const area = document.createElement("textarea");
          area.value = JSON.stringify(value ?? (prop.type === "array" ? [] : {{}}), null, 2);
          return area;
        }}
        default:
          return Object.assign(document.createElement("input"), {{ type: "text", value: value ?? "" }});
      }}
    }}

    function renderForm(schema) {{
      const form = document.getElementById("inputForm");
      form.innerHTML = "";
      Object.entries(schema.properties || {{}}).forEach(([key, prop]) => {{
        const label = document.createElement("label");
        label.textContent = prop.title || key;
        const control = fieldControl(key, prop);
        control.name = key;
        form.append(label, control);
        if (prop.description) {{
          const hint = document.createElement("small");
          hint.className = "hint";
          hint.textContent = prop.description;
          form.appendChild(hint);
        }}
      }});
      document.getElementById("runBtn").disabled = false;
    }}

    async function selectActor(actor, el) {{
      document.querySelectorAll(".actor").forEach((node) => node.classList.remove("selected"));
      el.classList.add("selected");
      session.actor = actor;
      setStatus("Loading input schema...");
      const data = await callApi(`/api/actors/${{encodeURIComponent(actor.id)}}/schema`);
      session.schema = data.schema;
      renderForm(data.schema);
      setStatus(`Selected ${{actor.title || actor.name}}.`, "ok");
    }}

    function renderActors(actors) {{
      const container = document.getElementById("actors");
      container.innerHTML = "";
      if (!actors.length) {{
        container.textContent = "No actors found for this account.";
        return;
      }}
      actors.forEach((actor) => {{
        const el = document.createElement("div");
        el.className = "actor";
        el.textContent = `${{actor.title || actor.name}} (${{actor.username || "unknown"}}/${{actor.name || ""}})`;
        el.addEventListener("click", () => selectActor(actor, el).catch((err) => setStatus(err.message, "error")));
        container.appendChild(el);
      }});
    }}

    function renderResults(run) {{
      const seconds = (run.duration / 1000).toFixed(2);
      document.getElementById("runInfo").textContent =
        `Run ${{run.runId}}: ${{run.status}} in ${{seconds}}s` + (run.message ? ` (${{run.message}})` : "");
      const container = document.getElementById("results");
      container.innerHTML = "";
      (run.results || []).forEach((item, index) => {{
        const pre = document.createElement("pre");
        pre.textContent = `#${{index + 1}}\\n` + JSON.stringify(item, null, 2);
        container.appendChild(pre);
      }});
    }}

    document.getElementById("connectBtn").addEventListener("click", async () => {{
      try {{
        const apiKey = document.getElementById("apiKey").value.trim();
        setStatus("Authenticating...");
        await callApi("/api/authenticate", "POST", {{ apiKey }});
        session.apiKey = apiKey;
        const data = await callApi("/api/actors");
        renderActors(data.actors);
        setStatus("Connected.", "ok");
      }} catch (err) {{
        setStatus(String(err.message || err), "error");
      }}
    }});

    document.getElementById("runBtn").addEventListener("click", async () => {{
      if (!session.actor) return;
      try {{
        const inputs = Object.fromEntries(new FormData(document.getElementById("inputForm")).entries());
        setStatus("Running actor, this can take a few minutes...");
        const run = await callApi(
          `/api/actors/${{encodeURIComponent(session.actor.id)}}/run`,
          "POST",
          {{ inputs, schema: session.schema }},
        );
        renderResults(run);
        setStatus(`Run finished with status ${{run.status}}.`, run.status === "SUCCEEDED" ? "ok" : "error");
      }} catch (err) {{
        setStatus(String(err.message || err), "error");
      }}
    }});
  </script>
</body>
</html>
"""
