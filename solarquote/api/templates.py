"""
Solar Quote Pro — HTML Templates
Inline Jinja templates for the dashboard, quotation editor and settings panel.
The proposal document itself lives in forms/html_render.py.
"""

BASE_CSS = """
:root{--bg:#0f1117;--sf:#1a1d27;--sf2:#242836;--bd:#2e3345;--tx:#e4e6ed;--tx2:#8b90a0;
--ac:#ef4444;--ac2:#dc2626;--gn:#34d399;--yl:#fbbf24;--rd:#f87171;--or:#fb923c;--r:10px}
*{margin:0;padding:0;box-sizing:border-box}
body{font-family:'DM Sans',sans-serif;background:var(--bg);color:var(--tx);min-height:100vh}
a{color:var(--ac);text-decoration:none}
.hdr{background:var(--sf);border-bottom:2px solid var(--bd);padding:14px 28px;display:flex;justify-content:space-between;align-items:center;flex-wrap:wrap;gap:12px;min-height:68px}
.hdr h1{font-size:17px;font-weight:600;letter-spacing:-0.3px;color:var(--tx2)}.hdr h1 span{color:var(--ac)}
.hdr-btn{padding:6px 14px;font-size:12px;font-weight:600;border-radius:6px;border:1px solid var(--bd);background:var(--sf2);color:var(--tx);cursor:pointer;text-decoration:none;transition:.15s;display:inline-flex;align-items:center;gap:4px}
.hdr-btn:hover{border-color:var(--ac);background:rgba(239,68,68,.1);color:#fff}
.hdr-active{border-color:var(--ac);background:rgba(239,68,68,.12)}
.hdr-right{display:flex;align-items:center;gap:10px;font-size:12px;font-family:'JetBrains Mono',monospace;color:var(--tx2)}
.ctr{max-width:1400px;margin:0 auto;padding:20px 28px}
.card{background:var(--sf);border:1px solid var(--bd);border-radius:var(--r);padding:20px;margin-bottom:16px}
.card-t{font-size:12px;font-weight:600;color:var(--tx2);text-transform:uppercase;letter-spacing:1px;margin-bottom:14px}
.sol{font-family:'JetBrains Mono',monospace;font-size:13px;font-weight:600;color:var(--ac)}
.det{font-size:12px;color:var(--tx2)}.det b{color:var(--tx)}
.badge{padding:3px 9px;border-radius:16px;font-size:10px;font-weight:600;text-transform:uppercase;letter-spacing:.5px}
.b-admin{background:rgba(239,68,68,.15);color:var(--ac)}.b-TL{background:rgba(251,191,36,.15);color:var(--yl)}
.b-user{background:rgba(52,211,153,.15);color:var(--gn)}
.meta-g{display:grid;grid-template-columns:repeat(auto-fit,minmax(220px,1fr));gap:10px;margin-bottom:14px}
.meta-i{background:var(--sf2);border-radius:8px;padding:10px 12px;display:block}
.meta-l{font-size:10px;color:var(--tx2);text-transform:uppercase;letter-spacing:.5px;display:block;margin-bottom:4px}
.meta-v{font-size:13px;font-weight:500;margin-top:3px}
input[type=text],input[type=number],input[type=password],input[type=search],select,textarea{background:var(--bg);border:1px solid var(--bd);color:var(--tx);padding:6px 8px;border-radius:6px;width:100%;font-size:13px;font-family:inherit}
input:focus,select:focus,textarea:focus{outline:none;border-color:var(--ac)}
table.it{width:100%;border-collapse:collapse;font-size:12px}
table.it th{text-align:left;padding:8px;font-size:10px;color:var(--tx2);text-transform:uppercase;letter-spacing:.5px;border-bottom:1px solid var(--bd)}
table.it td{padding:6px 8px;border-bottom:1px solid var(--bd);vertical-align:middle}
table.it tr:hover td{background:rgba(239,68,68,.04)}
.num{text-align:right;font-family:'JetBrains Mono',monospace}
.mono{font-family:'JetBrains Mono',monospace;font-size:11px;color:var(--tx2)}
.btn{display:inline-flex;align-items:center;gap:6px;padding:8px 16px;border-radius:7px;font-size:13px;font-weight:600;cursor:pointer;border:none;transition:.15s;text-decoration:none}
.btn-p{background:var(--ac);color:#fff}.btn-p:hover{background:var(--ac2)}
.btn-s{background:var(--sf2);color:var(--tx);border:1px solid var(--bd)}.btn-s:hover{border-color:var(--ac)}
.btn-g{background:var(--gn);color:#0f1117}.btn-g:hover{opacity:.9}
.btn-d{background:var(--rd);color:#fff}
.btn-sm{padding:4px 9px;font-size:11px;border-radius:5px}
.bg{display:flex;gap:8px;margin-top:16px;flex-wrap:wrap;align-items:center}
.acts{display:flex;gap:4px;flex-wrap:wrap}
.alert{padding:10px 14px;border-radius:8px;font-size:12px;margin-bottom:12px}
.al-s{background:rgba(52,211,153,.1);border:1px solid rgba(52,211,153,.3);color:var(--gn)}
.al-e{background:rgba(248,113,113,.1);border:1px solid rgba(248,113,113,.3);color:var(--rd)}
.al-w{background:rgba(251,191,36,.1);border:1px solid rgba(251,191,36,.3);color:var(--yl)}
.al-i{background:rgba(79,140,255,.1);border:1px solid rgba(79,140,255,.3);color:#79c0ff}
.eff{font-size:26px;font-weight:700;font-family:'JetBrains Mono',monospace;color:var(--gn)}
.tabs{display:flex;gap:6px;flex-wrap:wrap;margin-bottom:16px}
.empty{text-align:center;padding:48px 20px;color:var(--tx2)}
.thumb{max-height:60px;max-width:160px;background:#fff;border-radius:6px;padding:4px}
@media(max-width:900px){
 .meta-g{grid-template-columns:1fr 1fr!important}
 .ctr{padding:12px}
}
@media(max-width:600px){
 .meta-g{grid-template-columns:1fr!important}
 .card{padding:10px}
 table.it thead{display:none}
 table.it tr{display:block;border:1px solid var(--bd);border-radius:6px;margin-bottom:8px;padding:8px}
 table.it td{display:flex;justify-content:space-between;padding:4px 0;border:none}
}
"""

# Shared by the quotation editor and the BOM template editor.
BOM_ROWS = """
<table class="it" id="bom-table">
 <thead><tr><th style="width:36px">#</th><th>Product</th><th style="width:90px">UOM</th><th style="width:100px">Qty</th>
 <th>Specification</th><th>Make</th><th style="width:60px">Remove</th></tr></thead>
 <tbody>
 {% for item in bom_items %}
 <tr>
  <td class="mono">{{ loop.index }}<input type="hidden" name="bom_id" value="{{ item.id }}"></td>
  <td><input type="text" name="bom_product" value="{{ item.product }}"></td>
  <td><input type="text" name="bom_uom" value="{{ item.uom }}"></td>
  <td><input type="text" name="bom_quantity" value="{{ item.quantity }}"></td>
  <td><input type="text" name="bom_specification" value="{{ item.specification }}"></td>
  <td><input type="text" name="bom_make" value="{{ item.make }}"></td>
  <td style="text-align:center"><input type="checkbox" name="bom_remove" value="{{ item.id }}"></td>
 </tr>
 {% else %}
 <tr><td colspan="7" class="empty" style="padding:18px">No items yet. Add a row or apply a template.</td></tr>
 {% endfor %}
 </tbody>
</table>
"""

PAGE_DASHBOARD = """
<div class="card">
 <div style="display:flex;justify-content:space-between;align-items:center;gap:12px;flex-wrap:wrap">
  <form method="GET" action="{{ url_for('dashboard.home') }}" style="display:flex;gap:8px;flex:1;min-width:260px;max-width:560px">
   <input type="search" name="q" value="{{ q }}" placeholder="Search id, customer, DISCOM no., mobile, location, creator">
   <button type="submit" class="btn btn-s btn-sm">Search</button>
   {% if q %}<a href="{{ url_for('dashboard.home') }}" class="btn btn-s btn-sm">Clear</a>{% endif %}
  </form>
  <div class="acts">
   <a href="{{ url_for('dashboard.quote_new') }}" class="btn btn-p">+ New Quotation</a>
   {% if can_report %}<a href="{{ url_for('dashboard.master_report') }}" class="btn btn-g">Master Report (XLSX)</a>{% endif %}
  </div>
 </div>
</div>
<div class="card">
 <div class="card-t">Quotations ({{ rows|length }}{% if q %} matching "{{ q }}"{% endif %})</div>
 {% if rows %}
 <table class="it">
  <thead><tr><th>Quotation</th><th>Date</th><th>Customer</th><th>System</th>
  <th style="text-align:right">Effective Cost</th><th>Created By</th><th>Actions</th></tr></thead>
  <tbody>
  {% for r in rows %}{% set qt = r.quotation %}
  <tr>
   <td class="sol">{{ qt.id }}</td>
   <td class="mono">{{ qt.date }}</td>
   <td><b>{{ qt.customer_name or '(no name)' }}</b><div class="det">{{ qt.location }}{% if qt.mobile %} · {{ qt.mobile }}{% endif %}</div></td>
   <td class="det">{{ qt.system_description }}</td>
   <td class="num">{{ inr(qt.pricing.effective_cost) }}</td>
   <td>{{ r.creator_name }}</td>
   <td><div class="acts">
    <a class="btn btn-s btn-sm" href="{{ url_for('dashboard.quote_view', quote_id=qt.id) }}" target="_blank">View</a>
    <a class="btn btn-s btn-sm" href="{{ url_for('dashboard.quote_print', quote_id=qt.id) }}" target="_blank">Print</a>
    <a class="btn btn-s btn-sm" href="{{ url_for('dashboard.quote_pdf', quote_id=qt.id) }}">PDF</a>
    <a class="btn btn-s btn-sm" href="{{ url_for('dashboard.quote_xlsx', quote_id=qt.id) }}">XLSX</a>
    {% if r.can_edit %}<a class="btn btn-s btn-sm" href="{{ url_for('dashboard.quote_edit', quote_id=qt.id) }}">Edit</a>{% endif %}
    {% if r.can_delete %}
    <form method="POST" action="{{ url_for('dashboard.quote_delete', quote_id=qt.id) }}" style="display:inline">
     <button type="submit" class="btn btn-d btn-sm" onclick="return confirm('Delete this quotation?')">Delete</button>
    </form>{% endif %}
   </div></td>
  </tr>
  {% endfor %}
  </tbody>
 </table>
 {% else %}
 <div class="empty">{% if q %}No quotations match "{{ q }}"{% else %}No quotations yet. Create the first one.{% endif %}</div>
 {% endif %}
</div>
"""

PAGE_EDITOR = """
<a href="{{ url_for('dashboard.home') }}" class="btn btn-s" style="margin-bottom:16px">← Dashboard</a>
<form method="POST" action="{{ action_url }}" id="qf">
<input type="hidden" name="action" id="qf-action" value="save">
<input type="hidden" name="id" value="{{ quote.id }}">
<div class="card">
 <div class="card-t">{{ 'New' if is_new else 'Edit' }} Quotation · <span class="sol">{{ quote.id }}</span></div>
 <div class="meta-g">
  <label class="meta-i"><span class="meta-l">Customer Name</span><input type="text" name="customerName" value="{{ quote.customer_name }}"></label>
  <label class="meta-i"><span class="meta-l">DISCOM No.</span><input type="text" name="discomNumber" value="{{ quote.discom_number }}"></label>
  <label class="meta-i"><span class="meta-l">Mobile</span><input type="text" name="mobile" value="{{ quote.mobile }}"></label>
  <label class="meta-i"><span class="meta-l">Email</span><input type="text" name="email" value="{{ quote.email }}"></label>
  <label class="meta-i"><span class="meta-l">Location</span><input type="text" name="location" value="{{ quote.location }}"></label>
  <label class="meta-i"><span class="meta-l">Date</span><input type="text" name="date" value="{{ quote.date }}" placeholder="YYYY-MM-DD"></label>
 </div>
 <label class="meta-i"><span class="meta-l">Address</span><textarea name="address" rows="2">{{ quote.address }}</textarea></label>
</div>

<div class="card">
 <div class="card-t">System &amp; Pricing</div>
 <div class="meta-g">
  <label class="meta-i"><span class="meta-l">System Description</span>
   <select name="systemDescription" onchange="return applyAction('apply_description')">
    <option value="">Select a system</option>
    {% for d in descriptions %}<option value="{{ d.name }}"{% if d.name == quote.system_description %} selected{% endif %}>{{ d.name }}</option>{% endfor %}
    {% if quote.system_description and quote.system_description not in description_names %}
    <option value="{{ quote.system_description }}" selected>{{ quote.system_description }}</option>{% endif %}
   </select></label>
  <div class="meta-i"><span class="meta-l">Pricing Package</span>
   <div style="display:flex;gap:6px"><select name="pricingPackage">
    {% for p in pricings %}<option value="{{ p.id }}">{{ p.name }}</option>{% endfor %}
   </select><button type="button" class="btn btn-s btn-sm" onclick="return applyAction('apply_pricing')">Apply</button></div></div>
  <div class="meta-i"><span class="meta-l">BOM Template</span>
   <div style="display:flex;gap:6px"><select name="bomTemplate">
    {% for t in templates %}<option value="{{ t.id }}">{{ t.name }}</option>{% endfor %}
   </select><button type="button" class="btn btn-s btn-sm" onclick="return applyAction('apply_template')">Apply</button></div></div>
 </div>
 <div class="meta-g">
  {% for key, label in pricing_fields %}
  <label class="meta-i"><span class="meta-l">{{ label }}</span>
   <input type="number" step="any" name="{{ key }}" value="{{ pricing[key] }}"></label>
  {% endfor %}
 </div>
 <div class="meta-i" style="display:flex;justify-content:space-between;align-items:center">
  <span class="meta-l" style="margin:0">Effective Cost After Subsidy</span>
  <span class="eff">{{ inr(quote.pricing.effective_cost) }}</span>
 </div>
</div>

<div class="card">
 <div class="card-t">Bill of Materials ({{ bom_items|length }})</div>
 """ + BOM_ROWS + """
 <div class="bg">
  <button type="button" class="btn btn-s btn-sm" onclick="return applyAction('add_item')">+ Add Item</button>
  <button type="button" class="btn btn-s btn-sm" onclick="return applyAction('remove_items')">Remove Checked</button>
  <span style="flex:1"></span>
  <input type="text" name="templateName" placeholder="Template name" style="max-width:240px">
  <button type="button" class="btn btn-s btn-sm" onclick="return applyAction('save_template')">Save BOM as Template</button>
 </div>
</div>

<div class="bg" style="margin-bottom:24px">
 <button type="submit" class="btn btn-p">💾 Save Quotation</button>
 <a href="{{ url_for('dashboard.home') }}" class="btn btn-s">Cancel</a>
</div>
</form>
<script>
function applyAction(a){document.getElementById('qf-action').value=a;document.getElementById('qf').submit();return false;}
</script>
"""

PAGE_SETTINGS = """
<div class="tabs">
 {% for key, label in sections %}
 <a href="{{ url_for('dashboard.settings', section=key) }}" class="hdr-btn{% if key == section %} hdr-active{% endif %}">{{ label }}</a>
 {% endfor %}
</div>
<form method="POST" action="{{ url_for('dashboard.settings', section=section, t=selected.id if selected else None) }}" enctype="multipart/form-data" id="sf">
<input type="hidden" name="version" value="{{ version }}">
<input type="hidden" name="action" id="sf-action" value="save">
<div class="card">
 <div class="card-t">{{ section_label }}</div>

{% if section in ('company', 'bank', 'warranty') %}
 <div class="meta-g">
  {% for key, label, value in fields %}
  <label class="meta-i"><span class="meta-l">{{ label }}</span><input type="text" name="{{ key }}" value="{{ value }}"></label>
  {% endfor %}
 </div>
 {% if section == 'company' %}
 <div class="meta-g">
  {% for key, label in (('logo', 'Company Logo'), ('seal', 'Official Seal')) %}
  <div class="meta-i"><span class="meta-l">{{ label }}</span>
   {% if images[key] %}<img class="thumb" src="{{ images[key] }}" alt="{{ label }}"><br>
   <label class="det"><input type="checkbox" name="clear_{{ key }}" value="1"> Remove</label><br>{% endif %}
   <input type="file" name="{{ key }}" accept="image/*"></div>
  {% endfor %}
 </div>
 {% endif %}

{% elif section == 'terms' %}
 <table class="it">
  <thead><tr><th style="width:70px">Order</th><th>Text</th><th style="width:70px">Enabled</th><th style="width:60px">Remove</th></tr></thead>
  <tbody>{% for t in terms %}
  <tr><td><input type="hidden" name="term_id" value="{{ t.id }}"><input type="number" name="term_order" value="{{ t.order }}"></td>
   <td><textarea name="term_text" rows="2">{{ t.text }}</textarea></td>
   <td style="text-align:center"><input type="checkbox" name="term_enabled" value="{{ t.id }}"{% if t.enabled %} checked{% endif %}></td>
   <td style="text-align:center"><input type="checkbox" name="term_remove" value="{{ t.id }}"></td></tr>
  {% endfor %}</tbody>
 </table>
 <div class="bg"><button type="button" class="btn btn-s btn-sm" onclick="return applyAction('add_term')">+ Add Term</button></div>

{% elif section == 'pricing' %}
 <table class="it">
  <thead><tr><th>Package</th>{% for key, label in pricing_fields %}<th>{{ label }}</th>{% endfor %}<th>Remove</th></tr></thead>
  <tbody>{% for p in pricings %}{% set pd = p.pricing.to_dict() %}
  <tr><td><input type="hidden" name="pkg_id" value="{{ p.id }}"><input type="text" name="pkg_name" value="{{ p.name }}"></td>
   {% for key, label in pricing_fields %}<td><input type="number" step="any" name="pkg_{{ key }}" value="{{ pd[key] }}"></td>{% endfor %}
   <td style="text-align:center"><input type="checkbox" name="pkg_remove" value="{{ p.id }}"></td></tr>
  {% endfor %}</tbody>
 </table>
 <div class="bg"><button type="button" class="btn btn-s btn-sm" onclick="return applyAction('add_pricing')">+ Add Package</button></div>

{% elif section == 'templates' %}
 <table class="it">
  <thead><tr><th>Template</th><th>Items</th><th>Actions</th></tr></thead>
  <tbody>{% for t in templates %}
  <tr><td><b>{{ t.name }}</b>{% if selected and selected.id == t.id %} <span class="badge b-user">editing</span>{% endif %}</td>
   <td class="mono">{{ t.items|length }}</td>
   <td><div class="acts">
    <a class="btn btn-s btn-sm" href="{{ url_for('dashboard.settings', section='templates', t=t.id) }}">Edit</a>
    <button type="submit" class="btn btn-s btn-sm" formaction="{{ url_for('dashboard.template_duplicate', template_id=t.id) }}">Duplicate</button>
   </div></td></tr>
  {% endfor %}</tbody>
 </table>
 <div class="bg"><button type="button" class="btn btn-s btn-sm" onclick="return applyAction('add_template')">+ New Template</button></div>
 {% if selected %}
 <div class="card" style="margin-top:16px;background:var(--bg)">
  <div class="meta-g"><label class="meta-i"><span class="meta-l">Template Name</span>
   <input type="text" name="tpl_name" value="{{ selected.name }}"></label></div>
  """ + BOM_ROWS + """
  <div class="bg">
   <button type="button" class="btn btn-s btn-sm" onclick="return applyAction('add_item')">+ Add Item</button>
   <button type="button" class="btn btn-d btn-sm" onclick="if(confirm('Delete this template?'))applyAction('delete_template');return false;">Delete Template</button>
  </div>
 </div>
 {% endif %}

{% elif section == 'descriptions' %}
 <table class="it">
  <thead><tr><th>System Description</th><th>Default Pricing</th><th>Default BOM Template</th><th>Remove</th></tr></thead>
  <tbody>{% for d in descriptions %}
  <tr><td><input type="hidden" name="desc_id" value="{{ d.id }}"><input type="text" name="desc_name" value="{{ d.name }}"></td>
   <td><select name="desc_pricing"><option value="">None</option>
    {% for p in pricings %}<option value="{{ p.id }}"{% if p.id == d.default_pricing_id %} selected{% endif %}>{{ p.name }}</option>{% endfor %}
   </select></td>
   <td><select name="desc_template"><option value="">None</option>
    {% for t in templates %}<option value="{{ t.id }}"{% if t.id == d.default_bom_template_id %} selected{% endif %}>{{ t.name }}</option>{% endfor %}
   </select></td>
   <td style="text-align:center"><input type="checkbox" name="desc_remove" value="{{ d.id }}"></td></tr>
  {% endfor %}</tbody>
 </table>
 <div class="bg"><button type="button" class="btn btn-s btn-sm" onclick="return applyAction('add_description')">+ Add Description</button></div>

{% elif section == 'users' %}
 <table class="it">
  <thead><tr><th>Name</th><th>Username</th><th>Password</th><th>Role</th><th>Remove</th></tr></thead>
  <tbody>{% for u in users %}
  <tr><td><input type="hidden" name="user_id" value="{{ u.id }}"><input type="text" name="user_name" value="{{ u.name }}"></td>
   <td><input type="text" name="user_username" value="{{ u.username }}"></td>
   <td><input type="text" name="user_password" value="{{ u.password }}"></td>
   <td><select name="user_role">{% for r in roles %}<option{% if r == u.role %} selected{% endif %}>{{ r }}</option>{% endfor %}</select></td>
   <td style="text-align:center"><input type="checkbox" name="user_remove" value="{{ u.id }}"></td></tr>
  {% endfor %}</tbody>
 </table>
 <div class="bg"><button type="button" class="btn btn-s btn-sm" onclick="return applyAction('add_user')">+ Add User</button></div>
{% endif %}

</div>
<div class="bg"><button type="submit" class="btn btn-p">💾 Save {{ section_label }}</button></div>
</form>
<script>
function applyAction(a){document.getElementById('sf-action').value=a;document.getElementById('sf').submit();return false;}
</script>
"""

PAGE_ERROR = """
<div class="card">
 <div class="card-t">{{ title }}</div>
 <div class="alert al-e">❌ {{ message }}</div>
 <div class="bg">{% if back %}<a href="{{ back }}" class="btn btn-s">← Back</a>{% endif %}</div>
</div>
"""
