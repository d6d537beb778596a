import socket
import json


# ==========================================
# 3. DEBUG STATE FEED
# ==========================================
class NetworkBridge:
    """
    Publishes the shared tree state to one overlay client as
    newline-delimited JSON. Accepting is non-blocking so the tick loop
    never waits for a client.
    """

    def __init__(self, host="127.0.0.1", port=5556, send_timeout=0.05):
        self.addr = (host, port)
        self.sock = None
        self.conn = None
        # a client slower than this is dropped instead of stalling the tick loop
        self.send_timeout = send_timeout
        self._setup_server()

    def _setup_server(self):
        try:
            self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.sock.bind(self.addr)
            self.sock.listen(1)
            self.sock.setblocking(False)  # Non-blocking accept
            print(f"[NET] Listening on {self.addr}...")
        except OSError as e:
            print(f"[NET] Init Error: {e}")
            self.sock = None

    def update(self):
        """Check for new connections non-blockingly"""
        if self.conn is None and self.sock is not None:
            try:
                conn, addr = self.sock.accept()
                self.attach(conn)
                print(f"[NET] Connected: {addr}")
            except BlockingIOError:
                pass

    def attach(self, conn):
        conn.settimeout(self.send_timeout)
        self.conn = conn

    def send_event(self, event_data):
        if not self.conn:
            return
        try:
            msg = json.dumps(event_data) + "\n"
            self.conn.sendall(msg.encode("utf-8"))
        except (BrokenPipeError, ConnectionResetError):
            print("[NET] Client disconnected")
            self.conn = None
        except socket.timeout:
            print("[NET] Client too slow, dropping")
            self.conn.close()
            self.conn = None

    def publish(self, tree_state, render_state):
        self.update()
        payload = tree_state.to_dict()
        payload["progress"] = render_state.progress
        payload["camera"] = render_state.camera.to_dict()
        payload["orbitControls"] = render_state.orbit_controls_enabled
        self.send_event(payload)

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None
        if self.sock:
            self.sock.close()
            self.sock = None
