"""Static HTML shell for the usage dashboard (served at /).

The page renders nothing itself: it polls /api/state and copies the rendered
strings and classes into place, and hands the chart config to Chart.js.
"""

DASHBOARD_INDEX_HTML = r"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Maple API Usage</title>
  <script src="https://cdn.jsdelivr.net/npm/chart.js@4"></script>
  <style>
    :root {
      --bg: #0b1020;
      --panel: rgba(15, 23, 42, 0.6);
      --text: #f8fafc;
      --muted: #94a3b8;
      --accent: #6366f1;
      --accent-2: #8b5cf6;
      --danger: #f87171;
      --warn: #fbbf24;
      --success: #4ade80;
      --border: rgba(99, 102, 241, 0.2);
      --card-radius: 14px;
      --font: "Inter", "Segoe UI", system-ui, -apple-system, sans-serif;
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: var(--font);
      background: radial-gradient(circle at 10% 10%, rgba(99,102,241,0.08), transparent 35%), var(--bg);
      color: var(--text);
      min-height: 100vh;
    }
    .page { max-width: 1100px; margin: 0 auto; padding: 28px 22px 48px; }
    header { display: flex; align-items: center; justify-content: space-between; gap: 14px; margin-bottom: 18px; }
    header h1 { margin: 0; font-size: 22px; }
    .service-status { display: none; align-items: center; gap: 8px; color: var(--muted); font-size: 13px; }
    .status-dot { width: 10px; height: 10px; border-radius: 50%; background: var(--muted); display: inline-block; }
    .status-dot.active { background: var(--success); box-shadow: 0 0 8px rgba(74, 222, 128, 0.6); }
    .status-dot.error { background: var(--danger); }
    .status-dot.loading { background: var(--warn); }
    .env-badge { padding: 3px 8px; border-radius: 8px; border: 1px solid var(--border); background: rgba(99,102,241,0.15); }
    .env-badge.offline { background: rgba(248, 113, 113, 0.15); border-color: rgba(248, 113, 113, 0.3); color: #fecaca; }
    .token-row { display: flex; gap: 8px; align-items: center; }
    .token-row input { flex: 1; padding: 10px 12px; border-radius: 10px; border: 1px solid var(--border); background: var(--panel); color: var(--text); }
    button { padding: 10px 14px; border-radius: 10px; border: 1px solid var(--border); background: var(--accent); color: #fff; cursor: pointer; }
    button.ghost { background: transparent; }
    #refreshBtn { display: none; transition: transform 0.5s ease; }
    .error-message { display: none; margin: 12px 0; padding: 12px; border-radius: 10px; background: rgba(248,113,113,0.15); border: 1px solid rgba(248,113,113,0.3); color: #fecaca; }
    #dashboard { display: none; margin-top: 18px; }
    .user-info, .card, .chart-container, .global-stats { background: var(--panel); border: 1px solid var(--border); border-radius: var(--card-radius); padding: 16px; margin-bottom: 14px; }
    .user-info.admin { border-color: rgba(251, 191, 36, 0.4); }
    .plan-badge, .usage-badge { padding: 3px 8px; border-radius: 8px; font-size: 12px; background: rgba(99,102,241,0.2); }
    .usage-badge.limited { background: rgba(248,113,113,0.2); color: #fecaca; }
    .usage-badge.infinite { background: rgba(74,222,128,0.15); }
    .cards { display: grid; gap: 12px; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); }
    .stat-card .value { font-size: 24px; font-weight: 700; margin: 8px 0; }
    .progress { height: 8px; border-radius: 6px; background: rgba(148,163,184,0.15); overflow: hidden; }
    .progress .fill { height: 100%; }
    .muted { color: var(--muted); font-size: 13px; }
    .ban-info { margin-top: 10px; padding: 10px; border-radius: 10px; background: rgba(248,113,113,0.1); }
    .chart-box { height: 300px; }
    .chart-summary { display: grid; grid-template-columns: repeat(auto-fit, minmax(120px, 1fr)); gap: 15px; margin-top: 20px; }
    .chart-summary div.item { text-align: center; background: rgba(15, 23, 42, 0.4); padding: 15px; border-radius: 10px; border: 1px solid var(--border); }
    .chart-summary .v { font-size: 1.5em; font-weight: 700; }
    .endpoint-item { display: inline-block; margin: 4px; padding: 4px 8px; border-radius: 8px; background: rgba(148,163,184,0.1); font-size: 12px; }
    #securityDetails { display: none; }
  </style>
</head>
<body>
  <div class="page">
    <header>
      <h1>Maple API Usage</h1>
      <div class="service-status" id="serviceStatus">
        <span class="status-dot" id="serviceStatusDot"></span>
        <span id="serviceStatusText"></span>
        <span class="env-badge" id="environmentBadge"></span>
      </div>
    </header>

    <div class="token-row">
      <input id="apiToken" type="password" placeholder="Enter your API token" />
      <button class="ghost" id="tokenToggle" type="button">👁️</button>
      <button id="loadBtn" type="button"><span id="loadBtnText">Load</span><span id="loadSpinner" style="display:none;">…</span></button>
      <button class="ghost" id="clearBtn" type="button">Clear</button>
      <button class="ghost" id="refreshBtn" type="button">⟳</button>
    </div>
    <p class="muted">Your token stays on this machine. <a href="#" id="securityToggle">Details</a></p>
    <div id="securityDetails" class="muted">
      The token is kept by this dashboard process and forwarded only as a bearer token to the Maple API.
      <a href="#" id="securityHide">Hide</a>
    </div>

    <div class="error-message" id="errorMessage"></div>

    <div class="muted"><span class="status-dot" id="statusDot"></span> <span id="statusText"></span></div>

    <section id="dashboard">
      <div id="userInfo" class="user-info"></div>
      <div id="globalStats" class="global-stats" style="display:none;"></div>
      <div class="cards">
        <div class="card stat-card" id="rpmCard">
          <span class="usage-badge" id="rpmBadge">RPM</span>
          <div class="value" id="rpmValue">--</div>
          <div class="progress" id="rpmProgress"><div class="fill" id="rpmFill"></div></div>
          <div class="muted" id="rpmText"></div>
        </div>
        <div class="card stat-card" id="rpdCard">
          <span class="usage-badge" id="rpdBadge">RPD</span>
          <div class="value" id="rpdValue">--</div>
          <div class="progress" id="rpdProgress"><div class="fill" id="rpdFill"></div></div>
          <div class="muted" id="rpdText"></div>
        </div>
        <div class="card"><div class="muted">Total Requests</div><div class="value" id="totalUsage">--</div></div>
        <div class="card"><div class="muted">Total Tokens</div><div class="value" id="totalTokens">--</div></div>
        <div class="card"><div class="muted">Global Requests</div><div class="value" id="globalRequests">--</div></div>
        <div class="card"><div class="muted">Global Tokens</div><div class="value" id="globalTokens">--</div></div>
      </div>
      <div class="chart-container">
        <h3>Usage History</h3>
        <div class="chart-box"><canvas id="usageChart"></canvas></div>
        <div class="chart-summary" id="chartSummary"></div>
      </div>
      <div class="card" id="endpointsSection" style="display:none;">
        <h3>Endpoints <span class="muted" id="endpointCount"></span></h3>
        <div id="endpointsList"></div>
      </div>
      <p class="muted" id="lastUpdate"></p>
    </section>
  </div>

  <script>
    let chart = null;
    let chartId = null;

    const $ = (id) => document.getElementById(id);
    const esc = (v) => String(v ?? "").replace(/[&<>"']/g, (c) => ({ "&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#39;" }[c]));

    async function call(url, opts = {}) {
      const res = await fetch(url, { headers: { "Content-Type": "application/json" }, ...opts });
      const data = await res.json();
      return data.state || data;
    }

    function renderService(s) {
      $("serviceStatus").style.display = s.visible ? "flex" : "none";
      $("serviceStatusDot").className = "status-dot " + s.state;
      $("serviceStatusText").textContent = s.text;
      $("environmentBadge").textContent = s.environment;
      $("environmentBadge").className = "env-badge" + (s.offline ? " offline" : "");
    }

    function renderRateCard(kind, c) {
      if (!c) return;
      $(kind + "Card").className = c.card_class;
      $(kind + "Badge").textContent = c.badge_text;
      $(kind + "Badge").className = c.badge_class;
      $(kind + "Value").textContent = c.value_text;
      $(kind + "Progress").style.display = c.progress_visible ? "block" : "none";
      if (c.progress_visible) {
        $(kind + "Fill").style.width = c.fill_width + "%";
        $(kind + "Fill").style.background = c.fill_background;
        $(kind + "Fill").style.boxShadow = c.fill_shadow;
        $(kind + "Text").textContent = c.usage_text;
      } else {
        $(kind + "Text").textContent = "";
      }
    }

    function renderUser(u) {
      if (!u) return;
      $("userInfo").className = u.css_class;
      $("userInfo").innerHTML = `
        <h2>👤 ${esc(u.title)} <span class="plan-badge">${esc(u.plan)}</span>${u.admin ? ' <span>👑</span>' : ''}</h2>
        <div class="cards">
          <div><div class="muted">Username</div><div>${esc(u.handle)}</div></div>
          <div><div class="muted">Plan</div><div>${esc(u.plan)}</div></div>
          <div><div class="muted">Admin Status</div><div>${esc(u.admin_text)}</div></div>
        </div>
        ${u.banned ? `<div class="ban-info"><h3>⛔ Account Banned</h3>
          <p><strong>Reason:</strong> ${esc(u.ban_reason)}</p>
          <p><strong>Expires:</strong> ${esc(u.ban_expires)}</p></div>` : ''}`;
    }

    function renderGlobal(g) {
      if (!g) return;
      $("globalStats").style.display = "block";
      $("globalStats").innerHTML = `<h3>🌍 Global Service Statistics</h3>
        <div class="cards">
          <div><div class="v">${esc(g.total_requests)}</div><div class="muted">Total Requests</div></div>
          <div><div class="v">${esc(g.total_tokens)}</div><div class="muted">Total Tokens Used</div></div>
          <div><div class="v">${esc(g.endpoint_count)}</div><div class="muted">Available Endpoints</div></div>
        </div>`;
      $("globalRequests").textContent = g.total_requests;
      $("globalTokens").textContent = g.total_tokens;
      $("endpointsList").innerHTML = g.endpoints.map((e) => `<div class="endpoint-item">${esc(e)}</div>`).join("");
      $("endpointCount").textContent = g.endpoint_count_text;
      $("endpointsSection").style.display = "block";
    }

    function renderChart(c, summary) {
      if (!c || c.id === chartId || !window.Chart) return;
      if (chart) chart.destroy();
      const cfg = c.config;
      cfg.options.scales.y.ticks.callback = (value) => value + cfg.tick_suffix;
      cfg.options.plugins.tooltip = {
        displayColors: false,
        callbacks: { label: (ctx) => cfg.tooltip_template.replace("{y}", ctx.parsed.y) },
      };
      chart = new Chart($("usageChart").getContext("2d"), cfg);
      chartId = c.id;
      $("chartSummary").innerHTML = (summary ? summary.items : []).map((i) =>
        `<div class="item"><div class="v">${esc(i.value)}</div><div class="muted">${esc(i.label)}</div></div>`).join("");
    }

    function render(state) {
      renderService(state.service);
      $("statusDot").className = "status-dot " + state.status.state;
      $("statusText").textContent = state.status.text;
      $("errorMessage").textContent = state.error || "";
      $("errorMessage").style.display = state.error ? "block" : "none";
      $("dashboard").style.display = state.visible ? "block" : "none";
      $("refreshBtn").style.display = state.refresh_visible ? "flex" : "none";
      $("loadBtnText").style.display = state.loading ? "none" : "inline";
      $("loadSpinner").style.display = state.loading ? "inline-block" : "none";
      if (state.token_input && !$("apiToken").value) $("apiToken").value = state.token_input;
      if (!state.visible) return;
      renderUser(state.user_info);
      renderGlobal(state.global_stats);
      renderRateCard("rpm", state.rate_cards.rpm);
      renderRateCard("rpd", state.rate_cards.rpd);
      if (state.totals) {
        $("totalUsage").textContent = state.totals.total_usage;
        $("totalTokens").textContent = state.totals.total_tokens;
      }
      renderChart(state.chart, state.chart_summary);
      $("lastUpdate").textContent = state.last_updated || "";
    }

    async function poll() {
      try { render(await call("/api/state")); } catch (e) { console.error("State poll failed:", e); }
    }

    $("loadBtn").addEventListener("click", async () => {
      render(await call("/api/token", { method: "POST", body: JSON.stringify({ token: $("apiToken").value }) }));
    });
    $("apiToken").addEventListener("keypress", (e) => { if (e.key === "Enter") $("loadBtn").click(); });
    $("clearBtn").addEventListener("click", async () => {
      $("apiToken").value = "";
      render(await call("/api/token", { method: "DELETE" }));
    });
    $("refreshBtn").addEventListener("click", async () => {
      const btn = $("refreshBtn");
      btn.style.transform = "rotate(360deg)";
      setTimeout(() => { btn.style.transform = "rotate(0deg)"; }, 500);
      render(await call("/api/refresh", { method: "POST" }));
    });
    $("tokenToggle").addEventListener("click", () => {
      const input = $("apiToken");
      input.type = input.type === "password" ? "text" : "password";
      $("tokenToggle").textContent = input.type === "password" ? "👁️" : "🙈";
    });
    $("securityToggle").addEventListener("click", (e) => { e.preventDefault(); $("securityDetails").style.display = "block"; });
    $("securityHide").addEventListener("click", (e) => { e.preventDefault(); $("securityDetails").style.display = "none"; });

    poll();
    setInterval(poll, 5000);
  </script>
</body>
</html>
"""
