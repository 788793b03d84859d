"""HTML for the dashboard and the QR pairing page.

Placeholders (``__NAME__``) are substituted with ``str.replace`` so the
embedded CSS/JS braces need no escaping. Both pages follow the live status
over ``/ws``.
"""

from html import escape

_LIVE_SOCKET_JS = """
      function openLiveSocket(handlers) {
        const scheme = location.protocol === 'https:' ? 'wss://' : 'ws://';
        let socket = new WebSocket(scheme + location.host + '/ws');
        socket.onmessage = (msg) => {
          const frame = JSON.parse(msg.data);
          const handler = handlers[frame.event];
          if (handler) handler(frame.data);
        };
        socket.onclose = () => setTimeout(() => openLiveSocket(handlers), 3000);
        return socket;
      }
"""

QR_HTML = """<html>
  <head>
    <title>__TITLE__ | QR Code</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <style>
      body { font-family: Arial, sans-serif; text-align: center; margin-top: 50px; }
      img { max-width: 300px; }
      .container { max-width: 500px; margin: 0 auto; }
      .status { margin-top: 20px; padding: 10px; border-radius: 5px; }
      .connected { background-color: #d4edda; color: #155724; }
      .disconnected { background-color: #f8d7da; color: #721c24; }
    </style>
  </head>
  <body>
    <div class="container">
      <h1>Scan this QR Code</h1>
      <p>Open WhatsApp on your phone and scan this code to log in</p>
      <img src="__QR_IMAGE__" alt="WhatsApp QR Code">
      <div id="status" class="status disconnected">Waiting for scan...</div>
    </div>
    <script>
__LIVE_SOCKET_JS__
      const statusDiv = document.getElementById('status');
      openLiveSocket({
        status: (data) => {
          if (data.connected) {
            statusDiv.className = 'status connected';
            statusDiv.textContent = 'Connected! You can now use the API.';
          } else {
            statusDiv.className = 'status disconnected';
            statusDiv.textContent = data.message || 'Disconnected';
          }
        },
        qr: () => location.reload(),
      });
    </script>
  </body>
</html>
"""

INDEX_HTML = """<html>
  <head>
    <title>__TITLE__</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <style>
      body { font-family: Arial, sans-serif; text-align: center; margin-top: 50px; }
      .container { max-width: 600px; margin: 0 auto; padding: 20px; }
      .status { margin: 20px 0; padding: 15px; border-radius: 5px; }
      .connected { background-color: #d4edda; color: #155724; }
      .disconnected { background-color: #f8d7da; color: #721c24; }
      .btn { display: inline-block; padding: 10px 20px; margin: 10px; border: none;
             background-color: #4CAF50; color: white; text-decoration: none;
             border-radius: 5px; cursor: pointer; }
      pre { background-color: #f5f5f5; padding: 15px; border-radius: 5px;
            text-align: left; overflow: auto; }
      .group-list { text-align: left; margin-top: 20px; }
      .group-item { padding: 10px; border-bottom: 1px solid #eee; }
    </style>
  </head>
  <body>
    <div class="container">
      <h1>__TITLE__</h1>
      <div id="status" class="status disconnected">Checking status...</div>

      <div id="qrContainer" style="display: none;">
        <p>Scan this QR code with WhatsApp on your phone</p>
        <a href="/qr" class="btn">View QR Code</a>
      </div>

      <div id="apiInfo" style="display: none;">
        <h2>API Endpoints</h2>
        <p>Send message to a contact:</p>
        <pre>
POST /send-to-contact
{
  "phone": "1234567890",
  "message": "Hello world",
  "attachment": "https://example.com/image.jpg" (optional)
}</pre>
        <p>Send message to a group:</p>
        <pre>
POST /send-to-group
{
  "group": "group-id",
  "message": "Hello group",
  "attachment": "https://example.com/image.jpg" (optional)
}</pre>
        <p>Unified endpoint:</p>
        <pre>
POST /send
{
  "phone": "1234567890", // OR "group": "group-id"
  "message": "Hello",
  "attachment": "https://example.com/image.jpg" (optional)
}</pre>

        <h2>Groups</h2>
        <button id="refreshGroups" class="btn">Refresh Groups</button>
        <div id="groupList" class="group-list">Loading groups...</div>
      </div>
    </div>

    <script>
__LIVE_SOCKET_JS__
      const statusDiv = document.getElementById('status');
      const qrContainer = document.getElementById('qrContainer');
      const apiInfo = document.getElementById('apiInfo');
      const groupList = document.getElementById('groupList');
      const refreshGroupsBtn = document.getElementById('refreshGroups');

      function updateStatus(data) {
        if (data.connected) {
          statusDiv.className = 'status connected';
          statusDiv.textContent = 'Connected to WhatsApp';
          qrContainer.style.display = 'none';
          apiInfo.style.display = 'block';
          loadGroups();
        } else {
          statusDiv.className = 'status disconnected';
          statusDiv.textContent = data.message || 'Not connected to WhatsApp';
          qrContainer.style.display = 'block';
          apiInfo.style.display = 'none';
        }
      }

      function escapeHtml(text) {
        const div = document.createElement('div');
        div.textContent = text;
        return div.innerHTML;
      }

      function displayGroups(groups) {
        if (groups.length === 0) {
          groupList.innerHTML = '<p>No groups found</p>';
          return;
        }
        groupList.innerHTML = groups.map(group =>
          '<div class="group-item">' +
          '<strong>' + escapeHtml(group.name) + '</strong><br>' +
          'ID: <code>' + escapeHtml(group.id) + '</code><br>' +
          'Participants: ' + group.participants +
          '</div>'
        ).join('');
      }

      function showGroups(label, request) {
        request
          .then(res => res.json())
          .then(data => {
            if (data.success) {
              displayGroups(data.groups);
            } else {
              groupList.innerHTML = '<p>Error ' + label + ' groups: ' + escapeHtml(data.message) + '</p>';
            }
          })
          .catch(err => {
            groupList.innerHTML = '<p>Error ' + label + ' groups: ' + escapeHtml(err.message) + '</p>';
          });
      }

      function loadGroups() {
        showGroups('loading', fetch('/groups'));
      }

      refreshGroupsBtn.addEventListener('click', () => {
        groupList.innerHTML = 'Refreshing groups...';
        showGroups('refreshing', fetch('/refresh-groups', { method: 'POST' }));
      });

      fetch('/status').then(res => res.json()).then(updateStatus);

      openLiveSocket({
        status: updateStatus,
        qr: () => {
          statusDiv.textContent = 'New QR Code available. Please scan.';
          qrContainer.style.display = 'block';
        },
      });
    </script>
  </body>
</html>
"""


def render_index(title: str) -> str:
    return INDEX_HTML.replace("__LIVE_SOCKET_JS__", _LIVE_SOCKET_JS).replace("__TITLE__", escape(title))


def render_qr_page(title: str, qr_image: str) -> str:
    return (
        QR_HTML.replace("__LIVE_SOCKET_JS__", _LIVE_SOCKET_JS)
        .replace("__TITLE__", escape(title))
        .replace("__QR_IMAGE__", escape(qr_image, quote=True))
    )
