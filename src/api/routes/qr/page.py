"""Página HTML do visualizador de QR (consome /qr-stream via EventSource)."""

from __future__ import annotations

QR_PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>WhatsApp pairing</title>
  <style>
    body { font-family: system-ui, sans-serif; background: #f0f2f5; margin: 0;
           min-height: 100vh; display: flex; align-items: center; justify-content: center; }
    .card { background: #fff; border-radius: 16px; padding: 32px; width: 440px;
            box-shadow: 0 8px 32px rgba(0, 0, 0, 0.12); text-align: center; }
    h1 { color: #128c7e; font-size: 22px; margin: 0 0 24px; }
    .qr { min-height: 400px; display: flex; align-items: center; justify-content: center; }
    .qr img { width: 400px; height: 400px; display: none; }
    .badge { display: inline-block; padding: 8px 20px; border-radius: 20px;
             font-weight: 600; font-size: 14px; background: #fff3cd; color: #856404; }
    .badge.ok { background: #d4edda; color: #155724; }
    .badge.err { background: #f8d7da; color: #721c24; }
  </style>
</head>
<body>
  <div class="card">
    <h1>WhatsApp pairing</h1>
    <div class="qr">
      <img id="qr" alt="QR code">
      <p id="message">Connecting...</p>
    </div>
    <span id="badge" class="badge">Initializing</span>
  </div>
  <script>
    const img = document.getElementById("qr");
    const message = document.getElementById("message");
    const badge = document.getElementById("badge");
    const labels = {
      checking_session: ["Checking for a saved session...", "Checking session", ""],
      qr_ready: ["Scan the QR code with WhatsApp on your phone", "Ready to scan", "ok"],
      session_loaded: ["Session restored from the store", "Session loaded", "ok"],
      authenticated: ["Authenticating...", "Authenticating", ""],
      ready: ["WhatsApp connected", "Connected", "ok"],
      auth_failure: ["Authentication failed, refresh the page", "Failed", "err"],
    };
    const source = new EventSource("/qr-stream");
    source.onmessage = (event) => {
      const data = JSON.parse(event.data);
      const [text, label, cls] = labels[data.status] || [data.status, data.status, ""];
      img.style.display = data.qr ? "block" : "none";
      if (data.qr) { img.src = data.qr; }
      message.style.display = data.qr ? "none" : "block";
      message.textContent = text;
      badge.textContent = label;
      badge.className = "badge " + cls;
    };
    source.onerror = () => {
      message.style.display = "block";
      message.textContent = "Connection lost, refresh the page";
      badge.textContent = "Disconnected";
      badge.className = "badge err";
    };
  </script>
</body>
</html>
"""
